"""
Cleanup Service for crash leftovers.
Reconciles local scratch directories, remote temp chunks and stale sessions.
"""
import asyncio
import logging
import os
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional
from src.core import config
from src.core.exceptions import StorageIOException
from src.models.upload_session import UploadStatus
from src.repositories.object_store_repository import ObjectStoreRepository
from src.repositories.session_store import SessionStore
from src.services.file_service import FileService
from src.services.storage_paths import StoragePaths

logger = logging.getLogger(__name__)


class CleanupService:
    """
    Periodic reconciliation sweep.

    A process that dies mid-finalize leaves its scratch directory and the
    session's remote temp chunks behind; nothing in the request path ever
    revisits them. This sweep removes anything older than the stale threshold.
    """

    def __init__(
        self,
        object_store: ObjectStoreRepository,
        session_store: Optional[SessionStore] = None,
        file_service: Optional[FileService] = None,
        paths: Optional[StoragePaths] = None,
        stale_after: Optional[timedelta] = None,
        completed_ttl: Optional[timedelta] = None
    ):
        self.object_store = object_store
        self.session_store = session_store
        self.file_service = file_service or FileService()
        self.paths = paths or StoragePaths.from_settings()
        self.stale_after = stale_after or timedelta(hours=config.settings.stale_upload_hours)
        self.completed_ttl = completed_ttl or timedelta(minutes=config.settings.completed_session_ttl_minutes)

    def sweep_local_scratch(self) -> int:
        """Remove stale scratch directories. Returns the number removed."""
        active = self._active_session_ids()
        removed = 0
        for path in self.file_service.list_stale_scratch_dirs(self.stale_after):
            if os.path.basename(path) in active:
                continue
            try:
                self.file_service.remove_scratch_dir(path)
                removed += 1
            except StorageIOException as e:
                logger.warning("Could not remove stale scratch directory %s: %s", path, e.message)
        return removed

    def sweep_remote_temp(self, now: Optional[datetime] = None) -> int:
        """
        Delete stale temp chunks of sessions not active in this process.

        Returns:
            Number of chunk blobs deleted

        Raises:
            StorageIOException: If listing the temp prefix fails
        """
        now = now or datetime.now(timezone.utc)
        cutoff = now - self.stale_after
        active = self._active_session_ids()

        deleted = 0
        for obj in self.object_store.list(f"{self.paths.temp_root}/"):
            session_id = self.paths.session_id_from_path(obj.path)
            if session_id in active or _as_utc(obj.last_modified) >= cutoff:
                continue
            try:
                self.object_store.delete(obj.path)
                deleted += 1
            except StorageIOException as e:
                logger.warning("Could not delete orphaned chunk %s: %s", obj.path, e.message)
        return deleted

    def evict_sessions(self, now: Optional[datetime] = None) -> int:
        """Drop abandoned in-flight sessions and expired completed ones."""
        if self.session_store is None:
            return 0

        now = now or datetime.utcnow()
        evicted = 0
        for session in self.session_store.list_sessions():
            idle = now - session.updated_at
            # Never evict a session that a finalize call currently owns.
            if session.status == UploadStatus.FINALIZING:
                continue
            expired = (
                idle > self.completed_ttl
                if session.status == UploadStatus.COMPLETED
                else idle > self.stale_after
            )
            if expired:
                self.session_store.remove_session(session.session_id)
                evicted += 1
        return evicted

    async def evict_sessions_periodically(self, interval_seconds: float) -> None:
        """Evict expired sessions every interval until the task is cancelled."""
        logger.info("Session eviction loop started (every %ss)", interval_seconds)
        while True:
            await asyncio.sleep(interval_seconds)
            evicted = self.evict_sessions()
            if evicted:
                logger.info("Evicted %d expired upload sessions", evicted)

    def run(self) -> Dict[str, int]:
        """Run every sweep and report what was removed."""
        result = {
            "sessions_evicted": self.evict_sessions(),
            "scratch_dirs_removed": self.sweep_local_scratch(),
            "temp_chunks_deleted": self.sweep_remote_temp()
        }
        logger.info("Upload cleanup finished: %s", result)
        return result

    def _active_session_ids(self) -> set:
        if self.session_store is None:
            return set()
        return {
            session.session_id
            for session in self.session_store.list_sessions()
            if not session.status.is_terminal
        }


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
