"""
Dependency injection container for FastAPI.
Provides singleton-like behavior for services and repositories.
"""
from functools import lru_cache
from src.repositories.s3_repository import S3Repository
from src.repositories.object_store_repository import ObjectStoreRepository
from src.repositories.file_record_repository import FileRecordRepository
from src.repositories.session_store import InMemorySessionStore, SessionStore
from src.services.file_service import FileService
from src.services.chunk_service import ChunkIngestionService
from src.services.finalize_service import FinalizationPipeline
from src.services.image_service import ImageUploadService
from src.services.cleanup_service import CleanupService
from src.services.upload_service import UploadService


@lru_cache()
def get_object_store() -> ObjectStoreRepository:
    """Get the CDN object store singleton instance."""
    return S3Repository()


@lru_cache()
def get_session_store() -> SessionStore:
    """Get the process-wide session store."""
    return InMemorySessionStore()


@lru_cache()
def get_file_record_repository() -> FileRecordRepository:
    """Get FileRecordRepository singleton instance."""
    return FileRecordRepository()


@lru_cache()
def get_file_service() -> FileService:
    """Get FileService singleton instance."""
    return FileService()


@lru_cache()
def get_upload_service() -> UploadService:
    """Get UploadService singleton instance with injected dependencies."""
    session_store = get_session_store()
    object_store = get_object_store()
    file_record_repository = get_file_record_repository()
    return UploadService(
        session_store=session_store,
        chunk_service=ChunkIngestionService(session_store, object_store),
        finalization_pipeline=FinalizationPipeline(
            session_store=session_store,
            object_store=object_store,
            file_record_repository=file_record_repository,
            file_service=get_file_service()
        ),
        image_service=ImageUploadService(object_store, file_record_repository)
    )


@lru_cache()
def get_cleanup_service() -> CleanupService:
    """Get CleanupService singleton instance sharing the API's session store."""
    return CleanupService(
        object_store=get_object_store(),
        session_store=get_session_store(),
        file_service=get_file_service()
    )


def clear_dependency_cache() -> None:
    """Drop cached singletons so new settings take effect."""
    for factory in (
        get_object_store,
        get_session_store,
        get_file_record_repository,
        get_file_service,
        get_upload_service,
        get_cleanup_service
    ):
        factory.cache_clear()
