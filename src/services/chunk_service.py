"""
Chunk Ingestion Service.
Persists one client-submitted chunk to the CDN object store.
"""
import asyncio
import logging
from src.core.exceptions import ChunkIndexOutOfRangeException
from src.repositories.object_store_repository import ObjectStoreRepository
from src.repositories.session_store import SessionStore

logger = logging.getLogger(__name__)


class ChunkIngestionService:
    """Service accepting chunks for an upload session."""

    def __init__(self, session_store: SessionStore, object_store: ObjectStoreRepository):
        self.session_store = session_store
        self.object_store = object_store

    async def upload_chunk(self, session_id: str, chunk_index: int, data: bytes) -> bool:
        """
        Store one chunk and mark it uploaded.

        Re-submitting an index that is already recorded is a no-op, so clients
        can retry freely after a network error.

        Args:
            session_id: Upload session identifier
            chunk_index: Zero-based chunk index
            data: Chunk payload

        Returns:
            True if the chunk was written, False if it was already present

        Raises:
            SessionNotFoundException: If the session does not exist
            ChunkIndexOutOfRangeException: If chunk_index is outside [0, total_chunks)
            StorageIOException: If the CDN upload fails (not retried here)
        """
        session = self.session_store.get_session(session_id)

        if not 0 <= chunk_index < session.total_chunks:
            raise ChunkIndexOutOfRangeException(chunk_index, session.total_chunks)

        if chunk_index in session.uploaded_chunks:
            logger.debug("Chunk %s for %s already uploaded, skipping", chunk_index, session_id)
            return False

        await asyncio.to_thread(self.object_store.put, session.chunk_path(chunk_index), data)
        self.session_store.mark_chunk_uploaded(session_id, chunk_index)
        return True
