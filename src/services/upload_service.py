"""
Upload Service for business logic.
Orchestrates session, chunk, finalize and image operations for the API layer.
"""
import logging
from typing import Optional
from src.models.dto.upload_dto import (
    ChunkUploadResponse,
    FileRecordResponse,
    FinalizeUploadResponse,
    ImageUploadResponse,
    InitiateUploadResponse,
    UploadStatusResponse
)
from src.models.upload_session import UploadStatus
from src.repositories.session_store import SessionStore
from src.services.chunk_service import ChunkIngestionService
from src.services.finalize_service import FinalizationPipeline
from src.services.image_service import ImageUploadService

logger = logging.getLogger(__name__)


class UploadService:
    """Service for upload-related business operations."""

    def __init__(
        self,
        session_store: SessionStore,
        chunk_service: ChunkIngestionService,
        finalization_pipeline: FinalizationPipeline,
        image_service: ImageUploadService
    ):
        self.session_store = session_store
        self.chunk_service = chunk_service
        self.finalization_pipeline = finalization_pipeline
        self.image_service = image_service

    def initiate_upload(self, file_name: str, total_chunks: int, file_size: int) -> InitiateUploadResponse:
        """
        Open a new chunked upload session.

        Raises:
            ValidationException: If the file name is not usable as a path segment
        """
        session = self.session_store.create_session(file_name, total_chunks, file_size)
        logger.info("Upload initiated: %s for %s (%d chunks)", session.session_id, file_name, total_chunks)

        return InitiateUploadResponse(
            session_id=session.session_id,
            temp_path=session.temp_path,
            status=session.status.value,
            total_chunks=session.total_chunks
        )

    def get_upload_status(self, session_id: str) -> UploadStatusResponse:
        """
        Get upload session progress.

        Raises:
            SessionNotFoundException: If session_id is unknown
        """
        session = self.session_store.get_session(session_id)

        response = UploadStatusResponse(
            session_id=session.session_id,
            file_name=session.file_name,
            total_chunks=session.total_chunks,
            uploaded_chunks=self.session_store.list_uploaded_indices(session_id),
            status=session.status.value,
            file_size=session.file_size
        )
        if session.status == UploadStatus.COMPLETED:
            response.download_url = session.download_url
            response.artifact = FileRecordResponse.model_validate(session.artifact)
        return response

    async def upload_chunk(self, session_id: str, chunk_index: int, data: bytes) -> ChunkUploadResponse:
        """Store one chunk; duplicates are acknowledged without a second write."""
        written = await self.chunk_service.upload_chunk(session_id, chunk_index, data)

        return ChunkUploadResponse(
            session_id=session_id,
            chunk_index=chunk_index,
            message="Chunk uploaded successfully" if written else "Chunk already uploaded"
        )

    async def finalize_upload(self, session_id: str) -> FinalizeUploadResponse:
        """Reassemble all chunks into the final artifact."""
        result = await self.finalization_pipeline.finalize(session_id)

        return FinalizeUploadResponse(
            message="File uploaded and finalized successfully!",
            download_url=result.download_url,
            artifact=FileRecordResponse.model_validate(result.record)
        )

    async def upload_image(
        self,
        data: bytes,
        file_name: str,
        kind: str,
        mime_type: Optional[str] = None
    ) -> ImageUploadResponse:
        """Store a thumbnail or image without a session."""
        result = await self.image_service.upload_image(data, file_name, kind, mime_type)

        return ImageUploadResponse(
            message="Image uploaded successfully!",
            download_url=result.download_url,
            artifact=FileRecordResponse.model_validate(result.record)
        )
