"""In-memory collaborators for tests, demos and the CLI."""

from __future__ import annotations

import base64
from dataclasses import dataclass
import json
from pathlib import Path
from threading import Lock
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Set, Tuple

from pydantic import ValidationError

from core import TARGET_ID_KEY, Entity, PinnedEntry, ShortcutDescriptor
from utils.exceptions import ConfigurationError, PlatformError

from .base import EntitySource, FeatureGate, PhotoStore, Scheduler, ShortcutPlatform


class InMemoryEntitySource(EntitySource):
    """Ranked contact list held in memory.

    ``honor_limit=False`` mimics providers that ignore the limit parameter.
    """

    def __init__(self, entities: Iterable[Entity] = (), *, honor_limit: bool = False) -> None:
        self._entities: List[Entity] = list(entities)
        self._honor_limit = bool(honor_limit)
        self._lock = Lock()
        self.fetch_calls: List[int] = []
        self.resolve_calls: List[Tuple[str, int]] = []

    def set_entities(self, entities: Iterable[Entity]) -> None:
        with self._lock:
            self._entities = list(entities)

    def upsert(self, entity: Entity) -> None:
        with self._lock:
            self._entities = [item for item in self._entities if item.lookup_key != entity.lookup_key]
            self._entities.append(entity)

    def remove(self, lookup_key: str) -> bool:
        with self._lock:
            before = len(self._entities)
            self._entities = [item for item in self._entities if item.lookup_key != lookup_key]
            return len(self._entities) != before

    def fetch_top_ranked(self, limit: int) -> Iterator[Entity]:
        with self._lock:
            self.fetch_calls.append(int(limit))
            snapshot = list(self._entities)
        if self._honor_limit:
            snapshot = snapshot[: max(0, int(limit))]
        return iter(snapshot)

    def resolve_by_lookup_key(self, lookup_key: str, hint_id: int = 0) -> Optional[Entity]:
        with self._lock:
            self.resolve_calls.append((lookup_key, int(hint_id)))
            snapshot = list(self._entities)
        # The hint is a fast path only; it is ignored when it points at another contact.
        for entity in snapshot:
            if hint_id and entity.id == hint_id and entity.lookup_key == lookup_key:
                return entity
        for entity in snapshot:
            if entity.lookup_key == lookup_key:
                return entity
        return None


class InMemoryPhotoStore(PhotoStore):
    def __init__(self, photos: Optional[Mapping[int, bytes]] = None) -> None:
        self._photos: Dict[int, bytes] = dict(photos or {})
        self.fetch_calls: List[int] = []

    def put(self, entity_id: int, photo: bytes) -> None:
        self._photos[int(entity_id)] = bytes(photo)

    def fetch_photo_bytes(self, entity_id: int) -> Optional[bytes]:
        self.fetch_calls.append(int(entity_id))
        return self._photos.get(int(entity_id))


class InMemoryShortcutPlatform(ShortcutPlatform):
    """Records every publishing call and keeps the resulting shortcut state.

    Operations named in ``fail_on`` raise ``PlatformError``.
    """

    def __init__(
        self,
        *,
        icon_max_width: int = 192,
        icon_max_height: int = 192,
        pinned: Iterable[PinnedEntry] = (),
        fail_on: Optional[Set[str]] = None,
    ) -> None:
        self.icon_max_width = int(icon_max_width)
        self.icon_max_height = int(icon_max_height)
        self.fail_on: Set[str] = set(fail_on or set())
        self.calls: List[Tuple[str, Any]] = []
        self._dynamic: List[ShortcutDescriptor] = []
        self._pinned: Dict[str, PinnedEntry] = {item.shortcut_id: item for item in pinned}
        self._lock = Lock()

    @property
    def dynamic(self) -> List[ShortcutDescriptor]:
        with self._lock:
            return list(self._dynamic)

    def pinned(self, shortcut_id: str) -> Optional[PinnedEntry]:
        with self._lock:
            return self._pinned.get(shortcut_id)

    def call_names(self) -> List[str]:
        return [name for name, _ in self.calls]

    def pin(self, entry: PinnedEntry | ShortcutDescriptor) -> PinnedEntry:
        """Simulate the user pinning a shortcut."""
        if isinstance(entry, ShortcutDescriptor):
            entry = PinnedEntry(
                shortcut_id=entry.shortcut_id,
                extras=dict(entry.extras),
                enabled=True,
                short_label=entry.short_label,
                long_label=entry.long_label,
                icon=entry.icon,
                intent_uri=entry.intent_uri,
                disabled_message=entry.disabled_message,
            )
        with self._lock:
            self._pinned[entry.shortcut_id] = entry
        return entry

    def publish_dynamic_set(self, descriptors: Sequence[ShortcutDescriptor]) -> None:
        items = list(descriptors)
        self._record("publish_dynamic_set", [item.shortcut_id for item in items])
        with self._lock:
            self._dynamic = items

    def clear_dynamic_set(self) -> None:
        self._record("clear_dynamic_set", None)
        with self._lock:
            self._dynamic = []

    def list_pinned(self) -> List[PinnedEntry]:
        self._record("list_pinned", None)
        with self._lock:
            return list(self._pinned.values())

    def update_pinned(self, descriptors: Sequence[ShortcutDescriptor]) -> None:
        items = list(descriptors)
        self._record("update_pinned", [item.shortcut_id for item in items])
        with self._lock:
            for item in items:
                current = self._pinned.get(item.shortcut_id)
                if current is None:
                    continue
                self._pinned[item.shortcut_id] = current.model_copy(
                    update={
                        "extras": dict(item.extras),
                        "short_label": item.short_label,
                        "long_label": item.long_label,
                        "icon": item.icon,
                        "intent_uri": item.intent_uri,
                        "disabled_message": item.disabled_message,
                    }
                )

    def enable_pinned(self, shortcut_ids: Sequence[str]) -> None:
        ids = list(shortcut_ids)
        self._record("enable_pinned", ids)
        with self._lock:
            for shortcut_id in ids:
                current = self._pinned.get(shortcut_id)
                if current is not None:
                    self._pinned[shortcut_id] = current.model_copy(update={"enabled": True})

    def disable_pinned(self, shortcut_ids: Sequence[str], message: str) -> None:
        ids = list(shortcut_ids)
        self._record("disable_pinned", ids)
        with self._lock:
            for shortcut_id in ids:
                current = self._pinned.get(shortcut_id)
                if current is not None:
                    self._pinned[shortcut_id] = current.model_copy(
                        update={"enabled": False, "disabled_message": message}
                    )
            # Disabled shortcuts cannot stay published as dynamic ones.
            removed = set(ids)
            self._dynamic = [item for item in self._dynamic if item.shortcut_id not in removed]

    def snapshot(self) -> Dict[str, Any]:
        """JSON-friendly view of the published state."""
        with self._lock:
            dynamic = list(self._dynamic)
            pinned = list(self._pinned.values())
        return {
            "dynamic": [
                {
                    "shortcut_id": item.shortcut_id,
                    "short_label": item.short_label,
                    "long_label": item.long_label,
                    "contact_id": item.contact_id,
                    "intent_uri": item.intent_uri,
                    "icon": f"{item.icon.width}x{item.icon.height} {item.icon.source}",
                }
                for item in dynamic
            ],
            "pinned": [
                {
                    "shortcut_id": item.shortcut_id,
                    "enabled": item.enabled,
                    "short_label": item.short_label,
                    "long_label": item.long_label,
                    "disabled_message": None if item.enabled else item.disabled_message,
                }
                for item in pinned
            ],
        }

    def _record(self, operation: str, payload: Any) -> None:
        self.calls.append((operation, payload))
        if operation in self.fail_on:
            raise PlatformError("Shortcut platform rejected the call", operation=operation)


class InMemoryScheduler(Scheduler):
    def __init__(self, *, armed: bool = False) -> None:
        self._armed = bool(armed)
        self._lock = Lock()
        self.arm_calls: List[Tuple[int, int]] = []

    def is_window_armed(self) -> bool:
        with self._lock:
            return self._armed

    def arm_window(self, min_delay_millis: int, max_delay_millis: int) -> None:
        with self._lock:
            self.arm_calls.append((int(min_delay_millis), int(max_delay_millis)))
            self._armed = True

    def fire(self) -> bool:
        """Consume the armed window as the platform would when the job starts."""
        with self._lock:
            was_armed = self._armed
            self._armed = False
            return was_armed


class StaticFeatureGate(FeatureGate):
    def __init__(self, flags: Optional[Mapping[str, bool]] = None, *, default: bool = False) -> None:
        self._flags: Dict[str, bool] = {str(k): bool(v) for k, v in dict(flags or {}).items()}
        self._default = bool(default)

    def set(self, flag_name: str, enabled: bool) -> None:
        self._flags[str(flag_name)] = bool(enabled)

    def is_enabled(self, flag_name: str) -> bool:
        return self._flags.get(str(flag_name), self._default)


@dataclass
class Fixture:
    entity_source: InMemoryEntitySource
    photo_store: InMemoryPhotoStore
    platform: InMemoryShortcutPlatform
    scheduler: InMemoryScheduler
    feature_gate: StaticFeatureGate


def load_fixture(path: str | Path) -> Fixture:
    """Build in-memory collaborators from a JSON fixture.

    Contacts are listed in rank order; photos are given as ``photo_path``
    (relative to the fixture) or ``photo_base64``.
    """
    fixture_path = Path(path)
    try:
        payload = json.loads(fixture_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigurationError("Unreadable fixture", {"path": str(fixture_path), "error": str(exc)}) from exc
    if not isinstance(payload, dict):
        raise ConfigurationError("Fixture must be a JSON object", {"path": str(fixture_path)})

    entities: List[Entity] = []
    photos: Dict[int, bytes] = {}
    for index, row in enumerate(list(payload.get("contacts") or [])):
        try:
            entity = Entity(
                id=int(row.get("id") or 0),
                lookup_key=row.get("lookup_key"),
                display_name=row.get("display_name"),
            )
            photo = _fixture_photo(row, fixture_path.parent)
        except (ValidationError, ValueError, TypeError, AttributeError) as exc:
            raise ConfigurationError(
                "Invalid contact row", {"path": str(fixture_path), "row": index, "error": str(exc)}
            ) from exc
        entities.append(entity)
        if photo is not None:
            photos[entity.id] = photo

    pinned: List[PinnedEntry] = []
    for index, row in enumerate(list(payload.get("pinned") or [])):
        try:
            extras = None
            if "contact_id" in row:
                extras = {TARGET_ID_KEY: row.get("contact_id")}
            entry = PinnedEntry(
                shortcut_id=str(row.get("shortcut_id") or "").strip(),
                extras=extras,
                enabled=bool(row.get("enabled", True)),
                short_label=row.get("short_label"),
                long_label=row.get("long_label"),
            )
        except (ValidationError, ValueError, TypeError, AttributeError) as exc:
            raise ConfigurationError(
                "Invalid pinned row", {"path": str(fixture_path), "row": index, "error": str(exc)}
            ) from exc
        pinned.append(entry)

    icon_max = list(payload.get("icon_max") or [192, 192])
    return Fixture(
        entity_source=InMemoryEntitySource(entities, honor_limit=bool(payload.get("honor_limit", False))),
        photo_store=InMemoryPhotoStore(photos),
        platform=InMemoryShortcutPlatform(
            icon_max_width=int(icon_max[0]),
            icon_max_height=int(icon_max[-1]),
            pinned=pinned,
        ),
        scheduler=InMemoryScheduler(armed=bool(payload.get("window_armed", False))),
        feature_gate=StaticFeatureGate(dict(payload.get("feature_flags") or {}), default=True),
    )


def _fixture_photo(row: Mapping[str, Any], base_dir: Path) -> Optional[bytes]:
    if row.get("photo_base64"):
        return base64.b64decode(str(row["photo_base64"]))
    if row.get("photo_path"):
        photo_path = Path(str(row["photo_path"]))
        if not photo_path.is_absolute():
            photo_path = base_dir / photo_path
        try:
            return photo_path.read_bytes()
        except OSError as exc:
            raise ConfigurationError("Unreadable photo", {"path": str(photo_path), "error": str(exc)}) from exc
    return None
