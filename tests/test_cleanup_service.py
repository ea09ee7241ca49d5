"""
Unit tests for CleanupService.
"""
import asyncio
import os
import time
from datetime import datetime, timedelta, timezone
import pytest
from src.services.cleanup_service import CleanupService
from src.models.upload_session import UploadStatus


class TestCleanupService:
    """Test suite for CleanupService."""

    @pytest.fixture
    def cleanup_service(self, object_store, session_store, file_service, storage_paths):
        return CleanupService(
            object_store=object_store,
            session_store=session_store,
            file_service=file_service,
            paths=storage_paths,
            stale_after=timedelta(hours=24),
            completed_ttl=timedelta(minutes=60)
        )

    def _age(self, object_store, path, hours):
        object_store.last_modified[path] = datetime.now(timezone.utc) - timedelta(hours=hours)

    def test_sweep_remote_temp_deletes_stale_orphans(self, cleanup_service, object_store):
        object_store.put("media/temp_uploads/gone/chunk_0.part", b"a")
        object_store.put("media/temp_uploads/gone/chunk_1.part", b"b")
        object_store.put("media/temp_uploads/recent/chunk_0.part", b"c")
        object_store.put("media/uploads/clip.mp4", b"final")
        self._age(object_store, "media/temp_uploads/gone/chunk_0.part", 30)
        self._age(object_store, "media/temp_uploads/gone/chunk_1.part", 30)
        self._age(object_store, "media/uploads/clip.mp4", 30)

        deleted = cleanup_service.sweep_remote_temp()

        assert deleted == 2
        assert object_store.keys_under("media/temp_uploads/") == ["media/temp_uploads/recent/chunk_0.part"]
        assert "media/uploads/clip.mp4" in object_store.objects

    def test_sweep_remote_temp_skips_active_sessions(self, cleanup_service, object_store, session_store):
        session = session_store.create_session("clip.mp4", 1, 1)
        path = session.chunk_path(0)
        object_store.put(path, b"a")
        self._age(object_store, path, 48)

        assert cleanup_service.sweep_remote_temp() == 0
        assert path in object_store.objects

    def test_sweep_remote_temp_continues_after_delete_failure(self, cleanup_service, object_store):
        object_store.put("media/temp_uploads/gone/chunk_0.part", b"a")
        self._age(object_store, "media/temp_uploads/gone/chunk_0.part", 30)
        object_store.fail_delete = True

        assert cleanup_service.sweep_remote_temp() == 0

    def test_sweep_local_scratch(self, cleanup_service, file_service, session_store):
        active = session_store.create_session("clip.mp4", 1, 1)
        orphan = file_service.create_scratch_dir("orphan")
        owned = file_service.create_scratch_dir(active.session_id)
        fresh = file_service.create_scratch_dir("fresh")
        two_days_ago = time.time() - 2 * 24 * 3600
        os.utime(orphan, (two_days_ago, two_days_ago))
        os.utime(owned, (two_days_ago, two_days_ago))

        removed = cleanup_service.sweep_local_scratch()

        assert removed == 1
        assert not os.path.exists(orphan)
        assert os.path.isdir(owned)
        assert os.path.isdir(fresh)

    def test_evict_sessions(self, cleanup_service, session_store):
        abandoned = session_store.create_session("a.mp4", 2, 2)
        completed = session_store.create_session("b.mp4", 1, 1)
        session_store.set_status(completed.session_id, UploadStatus.FINALIZING)
        session_store.set_status(completed.session_id, UploadStatus.COMPLETED)
        finalizing = session_store.create_session("c.mp4", 1, 1)
        session_store.set_status(finalizing.session_id, UploadStatus.FINALIZING)

        evicted = cleanup_service.evict_sessions(now=datetime.utcnow() + timedelta(hours=2))

        assert evicted == 1
        remaining = {session.session_id for session in session_store.list_sessions()}
        assert remaining == {abandoned.session_id, finalizing.session_id}

        evicted = cleanup_service.evict_sessions(now=datetime.utcnow() + timedelta(hours=25))

        assert evicted == 1
        remaining = {session.session_id for session in session_store.list_sessions()}
        assert remaining == {finalizing.session_id}

    def test_evict_sessions_without_store(self, object_store, file_service, storage_paths):
        sweeper = CleanupService(object_store=object_store, file_service=file_service, paths=storage_paths)

        assert sweeper.evict_sessions() == 0

    @pytest.mark.asyncio
    async def test_evict_sessions_periodically(self, object_store, session_store, file_service, storage_paths):
        sweeper = CleanupService(
            object_store=object_store,
            session_store=session_store,
            file_service=file_service,
            paths=storage_paths,
            completed_ttl=timedelta(microseconds=1)
        )
        session = session_store.create_session("clip.mp4", 1, 1)
        session_store.set_status(session.session_id, UploadStatus.FINALIZING)
        session_store.set_status(session.session_id, UploadStatus.COMPLETED)

        task = asyncio.create_task(sweeper.evict_sessions_periodically(0.01))
        for _ in range(200):
            await asyncio.sleep(0.01)
            if not session_store.list_sessions():
                break

        assert session_store.list_sessions() == []
        assert not task.done()

        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

    def test_run_reports_counts(self, cleanup_service, object_store):
        object_store.put("media/temp_uploads/gone/chunk_0.part", b"a")
        self._age(object_store, "media/temp_uploads/gone/chunk_0.part", 30)

        result = cleanup_service.run()

        assert result == {
            "sessions_evicted": 0,
            "scratch_dirs_removed": 0,
            "temp_chunks_deleted": 1
        }
