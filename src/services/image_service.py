"""
Direct Image Upload Service.
Stores small single-blob uploads (thumbnails, images) without a session.
"""
import asyncio
import logging
from typing import Optional
from src.core.exceptions import ValidationException
from src.models.file_record import UploadedFileRecord
from src.repositories.file_record_repository import FileRecordRepository
from src.repositories.object_store_repository import ObjectStoreRepository
from src.services.finalize_service import UploadResult, guess_mime_type
from src.services.storage_paths import StoragePaths, ensure_safe_file_name, parse_media_kind

logger = logging.getLogger(__name__)


class ImageUploadService:
    """Service for one-shot image uploads."""

    def __init__(
        self,
        object_store: ObjectStoreRepository,
        file_record_repository: FileRecordRepository,
        paths: Optional[StoragePaths] = None
    ):
        self.object_store = object_store
        self.file_record_repository = file_record_repository
        self.paths = paths or StoragePaths.from_settings()

    async def upload_image(
        self,
        data: bytes,
        file_name: str,
        kind: str,
        mime_type: Optional[str] = None
    ) -> UploadResult:
        """
        Upload an image blob under its kind's prefix and record it.

        Args:
            data: Image bytes
            file_name: Target file name on the CDN
            kind: 'thumbnail' or 'image'
            mime_type: Content type reported by the client, guessed if absent

        Raises:
            InvalidMediaKindException: If kind is unknown (before any network call)
            ValidationException: If the payload is empty or the name is unsafe
            StorageIOException: If the CDN upload fails
            DynamoDBException: If the record cannot be saved
        """
        media_kind = parse_media_kind(kind)
        if not data:
            raise ValidationException("No image data provided for upload.")

        file_name = ensure_safe_file_name(file_name)
        path = self.paths.image_path(media_kind, file_name)
        content_type = mime_type or guess_mime_type(file_name)

        await asyncio.to_thread(self.object_store.put, path, data, content_type)
        download_url = self.paths.public_url(path)

        record = UploadedFileRecord(
            blob_name=file_name,
            container_name=media_kind.value,
            original_name=file_name,
            mime_type=content_type,
            size=len(data),
            url=download_url
        )
        record = await asyncio.to_thread(self.file_record_repository.create, record)

        logger.info("Stored %s %s at %s", media_kind.value, file_name, path)
        return UploadResult(download_url=download_url, record=record)
