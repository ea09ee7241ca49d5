"""
Finalization Pipeline.
Turns a complete set of chunks into one stored artifact.
"""
import asyncio
import contextlib
import logging
import mimetypes
from typing import NamedTuple, Optional
import aiofiles
import aiofiles.os
from src.core import config
from src.core.exceptions import (
    EmptyArtifactException,
    EmptyChunkException,
    FinalizationException,
    IncompleteUploadException,
    SessionNotFoundException,
    StorageIOException,
    UploadStateConflictException
)
from src.models.file_record import UploadedFileRecord
from src.models.upload_session import UploadSession, UploadStatus
from src.repositories.file_record_repository import FileRecordRepository
from src.repositories.object_store_repository import ObjectStoreRepository
from src.repositories.session_store import SessionStore
from src.services.file_service import FileService
from src.services.storage_paths import StoragePaths

logger = logging.getLogger(__name__)

DEFAULT_MIME_TYPE = "application/octet-stream"


class UploadResult(NamedTuple):
    download_url: str
    record: UploadedFileRecord


def guess_mime_type(file_name: str) -> str:
    return mimetypes.guess_type(file_name)[0] or DEFAULT_MIME_TYPE


class FinalizationPipeline:
    """
    State machine for one finalize call.

        initiated --(all chunks present)--> finalizing --> completed
        finalizing --(any failure)--> failed, then evicted

    Chunks are downloaded in ascending index order and each write to the
    local file is awaited before the next download, so at most one chunk is
    held in memory. A failure after the session enters ``finalizing`` is
    terminal: the session is evicted and the client must start over.
    """

    def __init__(
        self,
        session_store: SessionStore,
        object_store: ObjectStoreRepository,
        file_record_repository: FileRecordRepository,
        file_service: Optional[FileService] = None,
        paths: Optional[StoragePaths] = None,
        container_name: Optional[str] = None
    ):
        self.session_store = session_store
        self.object_store = object_store
        self.file_record_repository = file_record_repository
        self.file_service = file_service or FileService()
        self.paths = paths or StoragePaths.from_settings()
        self.container_name = container_name or config.settings.video_container

    async def finalize(self, session_id: str) -> UploadResult:
        """
        Reassemble, store and record the artifact of a session.

        Raises:
            SessionNotFoundException: If the session does not exist
            UploadStateConflictException: If the session is already finalizing or completed
            IncompleteUploadException: If chunks are missing (session left untouched)
            FinalizationException: On any failure once finalizing has started
        """
        session = self.session_store.get_session(session_id)

        if session.status != UploadStatus.INITIATED:
            raise UploadStateConflictException(session_id, session.status.value)

        if not session.is_complete:
            raise IncompleteUploadException(session_id, session.missing_chunks())

        if not self.session_store.compare_and_set_status(
            session_id, UploadStatus.INITIATED, UploadStatus.FINALIZING
        ):
            current = self.session_store.get_session(session_id)
            raise UploadStateConflictException(session_id, current.status.value)

        logger.info("Finalizing upload %s (%s, %d chunks)", session_id, session.file_name, session.total_chunks)

        scratch_dir = None
        stage = "preparing scratch directory"
        try:
            scratch_dir = await asyncio.to_thread(self.file_service.create_scratch_dir, session_id)
            local_path = self.file_service.scratch_file_path(scratch_dir, session.file_name)

            stage = "opening reassembly file"
            async with aiofiles.open(local_path, "wb") as out:
                for chunk_index in range(session.total_chunks):
                    stage = f"downloading chunk {chunk_index}"
                    chunk_path = session.chunk_path(chunk_index)
                    data = await asyncio.to_thread(self.object_store.get, chunk_path)
                    if not data:
                        raise EmptyChunkException(chunk_index, chunk_path)

                    stage = f"writing chunk {chunk_index}"
                    await out.write(data)

                stage = "flushing reassembled file"
                await out.flush()

            stage = "verifying reassembled file"
            size = await aiofiles.os.path.getsize(local_path)
            if size == 0:
                raise EmptyArtifactException(f"Reassembled file for session '{session_id}' is empty")

            mime_type = guess_mime_type(session.file_name)

            stage = "uploading artifact"
            await asyncio.to_thread(self.object_store.put_file, session.final_path, local_path, mime_type)

            await self._delete_remote_chunks(session)

            stage = "removing scratch directory"
            await asyncio.to_thread(self.file_service.remove_scratch_dir, scratch_dir)
            scratch_dir = None

            download_url = self.paths.public_url(session.final_path)

            stage = "recording artifact"
            record = UploadedFileRecord(
                blob_name=session.file_name,
                container_name=self.container_name,
                original_name=session.file_name,
                mime_type=mime_type,
                size=size,
                url=download_url
            )
            record = await asyncio.to_thread(self.file_record_repository.create, record)

            self.session_store.set_artifact(session_id, record, download_url)
            self.session_store.set_status(session_id, UploadStatus.COMPLETED)

        except asyncio.CancelledError:
            logger.warning("Finalization of %s cancelled while %s", session_id, stage)
            await self._fail(session_id, scratch_dir)
            raise

        except Exception as e:
            logger.error("Finalization of %s failed while %s", session_id, stage, exc_info=True)
            await self._fail(session_id, scratch_dir)
            raise FinalizationException(session_id, stage, e) from e

        logger.info("Upload %s finalized: %s (%d bytes)", session_id, download_url, size)
        return UploadResult(download_url=download_url, record=record)

    async def _delete_remote_chunks(self, session: UploadSession) -> None:
        # Orphaned temp chunks are left for the reconciliation sweep.
        try:
            await asyncio.to_thread(self.object_store.delete, f"{session.temp_path}/")
        except StorageIOException as e:
            logger.warning("Could not delete temporary chunks under %s: %s", session.temp_path, e.message)

    async def _fail(self, session_id: str, scratch_dir: Optional[str]) -> None:
        with contextlib.suppress(SessionNotFoundException):
            self.session_store.set_status(session_id, UploadStatus.FAILED)
        self.session_store.remove_session(session_id)

        if scratch_dir:
            try:
                await asyncio.to_thread(self.file_service.remove_scratch_dir, scratch_dir)
            except StorageIOException as e:
                logger.warning("Could not remove scratch directory %s: %s", scratch_dir, e.message)
