"""In-memory history of refresh cycles."""

from __future__ import annotations

from datetime import datetime, timezone
from threading import Lock
from typing import Dict, List, Optional
from uuid import uuid4

from core import RefreshStatus, RefreshTrigger


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_refresh_id() -> str:
    return f"refresh_{_utcnow().strftime('%Y%m%d_%H%M%S')}_{uuid4().hex[:8]}"


class InMemoryRefreshStore:
    """Thread-safe store of refresh statuses, oldest first."""

    def __init__(self, *, max_entries: int = 100) -> None:
        self._statuses: Dict[str, RefreshStatus] = {}
        self._max_entries = max(1, int(max_entries))
        self._lock = Lock()

    def create(self, trigger: RefreshTrigger = RefreshTrigger.MANUAL) -> str:
        with self._lock:
            refresh_id = _new_refresh_id()
            self._statuses[refresh_id] = RefreshStatus(refresh_id=refresh_id, trigger=trigger, state="queued")
            while len(self._statuses) > self._max_entries:
                oldest = next(iter(self._statuses))
                del self._statuses[oldest]
            return refresh_id

    def get_status(self, refresh_id: str) -> Optional[RefreshStatus]:
        with self._lock:
            status = self._statuses.get(refresh_id)
            return status.model_copy(deep=True) if status else None

    def list_statuses(self) -> List[RefreshStatus]:
        with self._lock:
            return [item.model_copy(deep=True) for item in self._statuses.values()]

    def update_running(self, refresh_id: str) -> Optional[RefreshStatus]:
        with self._lock:
            status = self._statuses.get(refresh_id)
            if not status:
                return None
            now = _utcnow()
            status.state = "running"
            status.timestamps.started_at = status.timestamps.started_at or now
            status.timestamps.updated_at = now
            return status.model_copy(deep=True)

    def update_completed(
        self,
        refresh_id: str,
        *,
        published: int = 0,
        updated: int = 0,
        enabled: int = 0,
        disabled: int = 0,
    ) -> Optional[RefreshStatus]:
        with self._lock:
            status = self._statuses.get(refresh_id)
            if not status:
                return None
            now = _utcnow()
            status.state = "completed"
            status.published = int(published)
            status.updated = int(updated)
            status.enabled = int(enabled)
            status.disabled = int(disabled)
            status.timestamps.completed_at = now
            status.timestamps.updated_at = now
            return status.model_copy(deep=True)

    def update_torn_down(self, refresh_id: str, *, disabled: int = 0) -> Optional[RefreshStatus]:
        with self._lock:
            status = self._statuses.get(refresh_id)
            if not status:
                return None
            now = _utcnow()
            status.state = "torn_down"
            status.disabled = int(disabled)
            status.timestamps.completed_at = now
            status.timestamps.updated_at = now
            return status.model_copy(deep=True)

    def update_failed(self, refresh_id: str, error: str) -> Optional[RefreshStatus]:
        with self._lock:
            status = self._statuses.get(refresh_id)
            if not status:
                return None
            status.state = "failed"
            if error:
                status.errors.append(str(error))
            status.timestamps.updated_at = _utcnow()
            return status.model_copy(deep=True)
