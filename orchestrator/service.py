"""Refresh orchestration: feature gate, teardown, serialized background refreshes."""

from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor
import logging
from threading import Lock
from typing import Callable, List, Optional

from config import Settings, get_settings
from core import RefreshStatus, RefreshTrigger
from icons import AvatarRenderer
from shortcuts import DynamicSetReconciler, PinnedSetReconciler, ShortcutBuilder
from sources.base import EntitySource, FeatureGate, PhotoStore, Scheduler, ShortcutPlatform

from .store import InMemoryRefreshStore


logger = logging.getLogger(__name__)


class RefreshOrchestrator:
    """Runs dynamic then pinned reconciliation, one refresh at a time."""

    def __init__(
        self,
        *,
        entity_source: EntitySource,
        platform: ShortcutPlatform,
        scheduler: Scheduler,
        feature_gate: FeatureGate,
        photo_store: Optional[PhotoStore] = None,
        settings: Optional[Settings] = None,
        avatar_renderer: Optional[AvatarRenderer] = None,
        store: Optional[InMemoryRefreshStore] = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._platform = platform
        self._scheduler = scheduler
        self._feature_gate = feature_gate
        self._store = store or InMemoryRefreshStore()

        sync = self._settings.sync
        builder = ShortcutBuilder.from_settings(
            self._settings,
            photo_store=photo_store,
            platform=platform,
            avatar_renderer=avatar_renderer,
        )
        self._dynamic = DynamicSetReconciler(
            entity_source=entity_source,
            platform=platform,
            builder=builder,
            max_shortcuts=sync.max_shortcuts,
            query_retries=sync.query_retries,
            retry_wait_max_seconds=sync.retry_wait_max_seconds,
        )
        self._pinned = PinnedSetReconciler(
            entity_source=entity_source,
            platform=platform,
            builder=builder,
            removed_message=sync.removed_message,
            query_retries=sync.query_retries,
            retry_wait_max_seconds=sync.retry_wait_max_seconds,
        )

        self._refresh_lock = Lock()
        self._state_lock = Lock()
        self._queued: Optional[Future] = None
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="shortcut-refresh")

    def __enter__(self) -> "RefreshOrchestrator":
        return self

    def __exit__(self, *exc_info) -> None:
        self.shutdown(wait=True)

    def feature_enabled(self) -> bool:
        return bool(self._feature_gate.is_enabled(self._settings.sync.feature_flag))

    def refresh(self, trigger: RefreshTrigger = RefreshTrigger.MANUAL) -> RefreshStatus:
        """One full cycle. Platform failures are recorded, then re-raised."""
        trigger = RefreshTrigger(trigger)
        refresh_id = self._store.create(trigger)
        with self._refresh_lock:
            self._store.update_running(refresh_id)
            logger.info("refresh_start refresh_id=%s trigger=%s", refresh_id, trigger.value)
            try:
                if not self.feature_enabled():
                    disabled = self.handle_flag_disabled()
                    logger.info("refresh_torn_down refresh_id=%s disabled=%s", refresh_id, len(disabled))
                    return self._store.update_torn_down(refresh_id, disabled=len(disabled))

                published = self._dynamic.reconcile()
                outcome = self._pinned.reconcile()
                # The published set may have changed, so keep observing.
                self.schedule_update_job()
            except Exception as exc:
                self._store.update_failed(refresh_id, str(exc))
                logger.error("refresh_failed refresh_id=%s error=%s", refresh_id, exc)
                raise

            logger.info(
                "refresh_completed refresh_id=%s published=%s updated=%s enabled=%s disabled=%s",
                refresh_id,
                len(published),
                len(outcome.updates),
                len(outcome.enable_ids),
                len(outcome.disable_ids),
            )
            return self._store.update_completed(
                refresh_id,
                published=len(published),
                updated=len(outcome.updates),
                enabled=len(outcome.enable_ids),
                disabled=len(outcome.disable_ids),
            )

    def handle_flag_disabled(self) -> List[str]:
        """Clear dynamic shortcuts and disable every enabled pinned one."""
        self._platform.clear_dynamic_set()
        ids = [entry.shortcut_id for entry in self._platform.list_pinned() if entry.enabled]
        self._platform.disable_pinned(ids, self._settings.sync.disabled_message)
        return ids

    def submit_refresh(self, trigger: RefreshTrigger = RefreshTrigger.MANUAL) -> Future:
        """Queue a refresh on the worker; a refresh still waiting to start absorbs new requests."""
        trigger = RefreshTrigger(trigger)
        with self._state_lock:
            if self._queued is not None:
                logger.debug("refresh_coalesced trigger=%s", trigger.value)
                return self._queued
            future = self._executor.submit(self._run_queued, trigger)
            self._queued = future
            return future

    def initialize(self) -> Optional[Future]:
        """Startup hook: refresh once unless a pending window will do it later."""
        if not self.feature_enabled():
            # Shortcuts must not linger after the feature is switched off.
            return self.submit_refresh(RefreshTrigger.INITIALIZE)
        if self._scheduler.is_window_armed():
            logger.debug("initialize_skipped window already armed")
            return None
        return self.submit_refresh(RefreshTrigger.INITIALIZE)

    def update_from_job(self, on_finished: Optional[Callable[[bool], None]] = None) -> Future:
        """Entry point for the scheduled job; ``on_finished(success)`` runs after the refresh."""
        future = self.submit_refresh(RefreshTrigger.JOB)

        def _done(done: Future) -> None:
            success = not done.cancelled() and done.exception() is None
            if not success:
                logger.error("job_refresh_failed error=%s", None if done.cancelled() else done.exception())
            if on_finished is not None:
                on_finished(success)

        future.add_done_callback(_done)
        return future

    def is_window_armed(self) -> bool:
        return bool(self._scheduler.is_window_armed())

    def schedule_update_job(self) -> None:
        schedule = self._settings.schedule
        self._scheduler.arm_window(schedule.min_update_delay_millis, schedule.max_update_delay_millis)

    def get_status(self, refresh_id: str) -> Optional[RefreshStatus]:
        return self._store.get_status(refresh_id)

    def history(self) -> List[RefreshStatus]:
        return self._store.list_statuses()

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)

    def _run_queued(self, trigger: RefreshTrigger) -> RefreshStatus:
        with self._state_lock:
            self._queued = None
        return self.refresh(trigger)
