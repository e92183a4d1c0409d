"""Dashboard components: providers, presenter and session."""

from .presenter import DashboardView, HistoricalView, SnapshotPresenter
from .providers import ProviderBundle, build_providers
from .session_manager import DashboardSession, SessionState
from .units import UnitSystem

__all__ = [
    "DashboardView",
    "HistoricalView",
    "SnapshotPresenter",
    "ProviderBundle",
    "build_providers",
    "DashboardSession",
    "SessionState",
    "UnitSystem",
]
