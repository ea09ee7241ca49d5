"""
Custom exceptions for the Media Upload API.
Provides specific error types for each upload failure scenario.
"""
from typing import Iterable


class MediaUploadException(Exception):
    """Base exception for all application errors."""
    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class ValidationException(MediaUploadException):
    """Raised when request data validation fails."""
    pass


class ChunkIndexOutOfRangeException(ValidationException):
    """Raised when a chunk index falls outside [0, total_chunks)."""
    def __init__(self, chunk_index: int, total_chunks: int):
        self.chunk_index = chunk_index
        self.total_chunks = total_chunks
        super().__init__(
            f"Chunk index {chunk_index} is out of range. Must be between 0 and {total_chunks - 1}."
        )


class SessionNotFoundException(MediaUploadException):
    """
    Raised when an upload session id is unknown.

    Usually means the session was already finalized or failed and evicted;
    clients should start a new upload.
    """
    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(f"Upload session '{session_id}' not found")


class IncompleteUploadException(MediaUploadException):
    """Raised when finalize is requested before all chunks are present."""
    def __init__(self, session_id: str, missing_chunks: Iterable[int]):
        self.session_id = session_id
        self.missing_chunks = sorted(missing_chunks)
        super().__init__(
            f"Not all chunks have been uploaded for session '{session_id}'. "
            f"Missing chunks: {self.missing_chunks}"
        )


class UploadStateConflictException(MediaUploadException):
    """Raised when finalize is requested on a session already finalizing or completed."""
    def __init__(self, session_id: str, status: str):
        self.session_id = session_id
        self.status = status
        super().__init__(f"Upload session '{session_id}' cannot be finalized while '{status}'")


class EmptyChunkException(MediaUploadException):
    """Raised when a downloaded chunk has zero length."""
    def __init__(self, chunk_index: int, path: str):
        self.chunk_index = chunk_index
        self.path = path
        super().__init__(f"Downloaded chunk {chunk_index} from {path} is empty. Cannot reassemble.")


class EmptyArtifactException(MediaUploadException):
    """Raised when the reassembled local file has zero length."""
    pass


class InvalidMediaKindException(MediaUploadException):
    """Raised when a direct image upload names an unknown media kind."""
    def __init__(self, kind: str):
        self.kind = kind
        super().__init__(f"Invalid media kind '{kind}'. Expected 'thumbnail' or 'image'.")


class StorageIOException(MediaUploadException):
    """Raised when a CDN object store or local filesystem operation fails."""
    pass


class DynamoDBException(MediaUploadException):
    """Raised when DynamoDB operation fails."""
    pass


class FinalizationException(MediaUploadException):
    """
    Terminal finalize failure. The session has been marked failed and evicted.

    ``stage`` names the pipeline step that failed and ``error`` keeps the
    original exception (also chained as ``__cause__``).
    """
    def __init__(self, session_id: str, stage: str, error: Exception):
        self.session_id = session_id
        self.stage = stage
        self.error = error
        detail = error.message if isinstance(error, MediaUploadException) else str(error)
        super().__init__(f"File finalization failed while {stage}: {detail}")

