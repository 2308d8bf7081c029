"""Core contracts and shared types for shortcut sync."""

from .contracts import (
    TARGET_ID_KEY,
    Entity,
    IconRaster,
    PinnedEntry,
    RefreshStatus,
    RefreshTrigger,
    ShortcutDescriptor,
    StatusTimestamps,
    lookup_uri,
    make_descriptor,
    read_target_id,
)

__all__ = [
    "TARGET_ID_KEY",
    "Entity",
    "IconRaster",
    "PinnedEntry",
    "RefreshStatus",
    "RefreshTrigger",
    "ShortcutDescriptor",
    "StatusTimestamps",
    "lookup_uri",
    "make_descriptor",
    "read_target_id",
]
