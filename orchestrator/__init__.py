"""Refresh orchestration for shortcut sync."""

from .service import RefreshOrchestrator
from .store import InMemoryRefreshStore

__all__ = [
    "InMemoryRefreshStore",
    "RefreshOrchestrator",
]
