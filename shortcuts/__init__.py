"""Shortcut labels, descriptor building and set reconciliation."""

from .builder import ShortcutBuilder
from .labels import ELLIPSIS, LabelTruncator, truncate
from .reconcilers import DynamicSetReconciler, PinnedOutcome, PinnedSetReconciler, query_retrying

__all__ = [
    "ELLIPSIS",
    "DynamicSetReconciler",
    "LabelTruncator",
    "PinnedOutcome",
    "PinnedSetReconciler",
    "ShortcutBuilder",
    "query_retrying",
    "truncate",
]
