"""
Uploaded file record domain model.
Database-agnostic metadata for a stored artifact or image.
"""
import uuid
from datetime import datetime
from enum import Enum
from typing import List, Optional


class MediaKind(str, Enum):
    """Logical buckets accepted by the direct image upload path."""
    THUMBNAIL = "thumbnail"
    IMAGE = "image"


class UploadedFileRecord:
    """Domain model representing one stored file."""

    def __init__(
        self,
        blob_name: str,
        container_name: str,
        original_name: str,
        mime_type: str,
        size: int,
        url: str,
        visibility: str = "public",
        status: str = "available",
        tags: Optional[List[str]] = None,
        file_id: Optional[str] = None,
        created_at: Optional[datetime] = None
    ):
        self.file_id = file_id or str(uuid.uuid4())
        self.blob_name = blob_name
        self.container_name = container_name
        self.original_name = original_name
        self.mime_type = mime_type
        self.size = size
        self.url = url
        self.visibility = visibility
        self.status = status
        self.tags = list(tags or [])
        self.created_at = created_at or datetime.utcnow()

    def __repr__(self):
        return f"UploadedFileRecord(file_id={self.file_id}, blob_name={self.blob_name}, size={self.size})"
