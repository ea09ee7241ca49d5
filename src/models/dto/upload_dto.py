"""
Data Transfer Objects for the Upload API.
Defines request and response schemas for upload endpoints.
"""
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator


class InitiateUploadRequest(BaseModel):
    """Request schema for opening a chunked upload session."""
    file_name: str = Field(..., min_length=1, max_length=255, description="Name of the file being uploaded")
    total_chunks: int = Field(..., ge=1, description="Number of chunks the client will send")
    file_size: int = Field(..., ge=1, description="Expected total size in bytes")

    @field_validator('file_name')
    @classmethod
    def validate_not_empty(cls, v: str) -> str:
        if not v or v.strip() == "":
            raise ValueError("Field cannot be empty")
        return v.strip()


class InitiateUploadResponse(BaseModel):
    """Response schema for a newly opened upload session."""
    session_id: str = Field(..., description="Unique identifier for the upload session")
    temp_path: str = Field(..., description="Remote prefix holding the session's chunks")
    status: str = Field(..., description="Session status")
    total_chunks: int


class FileRecordResponse(BaseModel):
    """Response schema for stored file metadata."""
    file_id: str
    blob_name: str
    container_name: str
    original_name: str
    mime_type: str
    size: int
    visibility: str
    status: str
    url: str
    tags: List[str] = []
    created_at: datetime

    class Config:
        from_attributes = True


class UploadStatusResponse(BaseModel):
    """Response schema for upload session status query."""
    session_id: str
    file_name: str
    total_chunks: int
    uploaded_chunks: List[int]
    status: str
    file_size: int
    download_url: Optional[str] = None
    artifact: Optional[FileRecordResponse] = None


class ChunkUploadResponse(BaseModel):
    """Response schema for an accepted chunk."""
    session_id: str
    chunk_index: int
    message: str


class FinalizeUploadResponse(BaseModel):
    """Response schema for a completed finalize."""
    message: str
    download_url: str
    artifact: FileRecordResponse


class ImageUploadResponse(BaseModel):
    """Response schema for a direct image upload."""
    message: str
    download_url: str
    artifact: FileRecordResponse
