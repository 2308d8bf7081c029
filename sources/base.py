"""Collaborator interfaces the shortcut engine talks to.

Each base class raises ``NotImplementedError``; concrete platforms subclass
them, and ``sources.memory`` provides in-memory versions for tests and the CLI.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence

from core import Entity, PinnedEntry, ShortcutDescriptor


class EntitySource:
    """Ranked contact query layer."""

    def fetch_top_ranked(self, limit: int) -> Iterable[Entity]:
        """Contacts in rank order. Implementations may ignore ``limit``."""
        raise NotImplementedError

    def resolve_by_lookup_key(self, lookup_key: str, hint_id: int = 0) -> Optional[Entity]:
        """Current contact for ``lookup_key``; ``hint_id`` may be stale."""
        raise NotImplementedError


class PhotoStore:
    def fetch_photo_bytes(self, entity_id: int) -> Optional[bytes]:
        raise NotImplementedError


class ShortcutPlatform:
    """Launcher shortcut publishing API."""

    icon_max_width: int = 192
    icon_max_height: int = 192

    def publish_dynamic_set(self, descriptors: Sequence[ShortcutDescriptor]) -> None:
        raise NotImplementedError

    def clear_dynamic_set(self) -> None:
        raise NotImplementedError

    def list_pinned(self) -> List[PinnedEntry]:
        raise NotImplementedError

    def update_pinned(self, descriptors: Sequence[ShortcutDescriptor]) -> None:
        raise NotImplementedError

    def enable_pinned(self, shortcut_ids: Sequence[str]) -> None:
        raise NotImplementedError

    def disable_pinned(self, shortcut_ids: Sequence[str], message: str) -> None:
        raise NotImplementedError


class Scheduler:
    """Content-change debounce window."""

    def is_window_armed(self) -> bool:
        raise NotImplementedError

    def arm_window(self, min_delay_millis: int, max_delay_millis: int) -> None:
        raise NotImplementedError


class FeatureGate:
    def is_enabled(self, flag_name: str) -> bool:
        raise NotImplementedError
