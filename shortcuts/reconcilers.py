"""Dynamic and pinned shortcut reconciliation."""

from __future__ import annotations

from dataclasses import dataclass, field
from itertools import islice
import logging
from typing import Iterable, List, Optional, Set

from tenacity import Retrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from core import Entity, PinnedEntry, ShortcutDescriptor, read_target_id
from sources.base import EntitySource, ShortcutPlatform
from utils.exceptions import EntitySourceError

from .builder import ShortcutBuilder


logger = logging.getLogger(__name__)


def query_retrying(attempts: int = 3, wait_max_seconds: float = 2.0) -> Retrying:
    """Retry policy for contact queries; other errors pass straight through."""
    return Retrying(
        stop=stop_after_attempt(max(1, int(attempts))),
        wait=wait_exponential(multiplier=0.5, min=0, max=max(0.0, float(wait_max_seconds))),
        retry=retry_if_exception_type(EntitySourceError),
        reraise=True,
    )


class DynamicSetReconciler:
    """Replaces the published dynamic set with the current top-ranked contacts."""

    def __init__(
        self,
        *,
        entity_source: EntitySource,
        platform: ShortcutPlatform,
        builder: ShortcutBuilder,
        max_shortcuts: int = 3,
        query_retries: int = 3,
        retry_wait_max_seconds: float = 2.0,
    ) -> None:
        self._source = entity_source
        self._platform = platform
        self._builder = builder
        self._max_shortcuts = max(0, int(max_shortcuts))
        self._query_retries = query_retries
        self._retry_wait_max_seconds = retry_wait_max_seconds

    @property
    def max_shortcuts(self) -> int:
        return self._max_shortcuts

    def fetch_ranked(self) -> List[Entity]:
        """Top contacts, capped client-side: providers are known to ignore the limit."""
        limit = self._max_shortcuts

        def _query() -> List[Entity]:
            return list(islice(self._source.fetch_top_ranked(limit), limit))

        return query_retrying(self._query_retries, self._retry_wait_max_seconds)(_query)

    def build_all(self, entities: Iterable[Entity]) -> List[ShortcutDescriptor]:
        descriptors: List[ShortcutDescriptor] = []
        for entity in entities:
            try:
                descriptors.append(self._builder.build(entity))
            except Exception:
                logger.exception("dynamic_build_failed lookup_key=%s", entity.lookup_key)
        return descriptors

    def reconcile(self) -> List[ShortcutDescriptor]:
        """Publish the full ordered list, even when it is empty."""
        descriptors = self.build_all(self.fetch_ranked())
        self._platform.publish_dynamic_set(descriptors)
        logger.info("dynamic_published count=%s ids=%s", len(descriptors), [d.shortcut_id for d in descriptors])
        return descriptors


@dataclass
class PinnedOutcome:
    """Batches produced by one pinned-set pass."""

    updates: List[ShortcutDescriptor] = field(default_factory=list)
    enable_ids: List[str] = field(default_factory=list)
    disable_ids: List[str] = field(default_factory=list)
    skipped_ids: List[str] = field(default_factory=list)


class PinnedSetReconciler:
    """Refreshes content and enabled state of shortcuts the user pinned.

    Pin membership is never changed here; only entries the platform already
    tracks are updated, enabled or disabled.
    """

    def __init__(
        self,
        *,
        entity_source: EntitySource,
        platform: ShortcutPlatform,
        builder: ShortcutBuilder,
        removed_message: str = "Contact was removed",
        query_retries: int = 3,
        retry_wait_max_seconds: float = 2.0,
    ) -> None:
        self._source = entity_source
        self._platform = platform
        self._builder = builder
        self._removed_message = removed_message
        self._query_retries = query_retries
        self._retry_wait_max_seconds = retry_wait_max_seconds

    def classify(self, entries: Iterable[PinnedEntry]) -> PinnedOutcome:
        outcome = PinnedOutcome()
        seen: Set[str] = set()
        retrying = query_retrying(self._query_retries, self._retry_wait_max_seconds)

        for entry in entries:
            if entry.shortcut_id in seen:
                continue
            seen.add(entry.shortcut_id)

            # The stored id may be stale after a renumbering; it is only a hint.
            hint_id = read_target_id(entry.extras)
            try:
                entity = retrying(self._source.resolve_by_lookup_key, entry.shortcut_id, hint_id)
            except EntitySourceError as exc:
                logger.warning("pinned_resolve_failed shortcut_id=%s error=%s", entry.shortcut_id, exc)
                outcome.skipped_ids.append(entry.shortcut_id)
                continue
            except Exception:
                logger.exception("pinned_resolve_crashed shortcut_id=%s", entry.shortcut_id)
                outcome.skipped_ids.append(entry.shortcut_id)
                continue

            if entity is None:
                if entry.enabled:
                    outcome.disable_ids.append(entry.shortcut_id)
                continue

            descriptor = self._build(entity)
            if descriptor is None:
                outcome.skipped_ids.append(entry.shortcut_id)
                continue
            outcome.updates.append(descriptor)
            if not entry.enabled:
                # The contact came back, e.g. restored by a sync.
                outcome.enable_ids.append(descriptor.shortcut_id)

        return outcome

    def reconcile(self) -> PinnedOutcome:
        """Issue exactly one update, one enable and one disable call, in that order."""
        outcome = self.classify(self._platform.list_pinned())
        self._platform.update_pinned(outcome.updates)
        self._platform.enable_pinned(outcome.enable_ids)
        self._platform.disable_pinned(outcome.disable_ids, self._removed_message)
        logger.info(
            "pinned_reconciled updated=%s enabled=%s disabled=%s skipped=%s",
            len(outcome.updates),
            len(outcome.enable_ids),
            len(outcome.disable_ids),
            len(outcome.skipped_ids),
        )
        return outcome

    def _build(self, entity: Entity) -> Optional[ShortcutDescriptor]:
        try:
            return self._builder.build(entity)
        except Exception:
            logger.exception("pinned_build_failed lookup_key=%s", entity.lookup_key)
            return None
