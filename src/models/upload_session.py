"""
Upload Session domain model.
Represents one in-progress resumable chunked upload.
"""
from datetime import datetime
from enum import Enum
from typing import Optional, Set
from src.models.file_record import UploadedFileRecord


class UploadStatus(str, Enum):
    """Lifecycle states of an upload session."""
    INITIATED = "initiated"
    FINALIZING = "finalizing"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (UploadStatus.COMPLETED, UploadStatus.FAILED)


class UploadSession:
    """Domain model for upload session tracking."""

    def __init__(
        self,
        session_id: str,
        file_name: str,
        total_chunks: int,
        file_size: int,
        temp_path: str,
        final_path: str,
        status: UploadStatus = UploadStatus.INITIATED,
        uploaded_chunks: Optional[Set[int]] = None,
        artifact: Optional[UploadedFileRecord] = None,
        download_url: Optional[str] = None,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None
    ):
        self.session_id = session_id
        self.file_name = file_name
        self.total_chunks = total_chunks
        self.file_size = file_size
        self.temp_path = temp_path
        self.final_path = final_path
        self.status = status
        self.uploaded_chunks = set(uploaded_chunks or ())
        self.artifact = artifact
        self.download_url = download_url
        self.created_at = created_at or datetime.utcnow()
        self.updated_at = updated_at or self.created_at

    @property
    def is_complete(self) -> bool:
        """True once every chunk index has been recorded."""
        return len(self.uploaded_chunks) == self.total_chunks

    def missing_chunks(self) -> Set[int]:
        return set(range(self.total_chunks)) - self.uploaded_chunks

    def chunk_path(self, chunk_index: int) -> str:
        """Remote path of one chunk blob under the session's temp prefix."""
        return f"{self.temp_path}/chunk_{chunk_index}.part"

    def __repr__(self):
        return (
            f"UploadSession(session_id={self.session_id}, file_name={self.file_name}, "
            f"status={self.status.value}, chunks={len(self.uploaded_chunks)}/{self.total_chunks})"
        )
