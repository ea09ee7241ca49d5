"""
Upload API routes.
Handles HTTP endpoints for chunked upload sessions and direct image uploads.
"""
from fastapi import APIRouter, Depends, File, Form, HTTPException, Path, Request, UploadFile, status
from src.services.upload_service import UploadService
from src.core.dependencies import get_upload_service
from src.core.auth_dependencies import verify_token
from src.models.dto.upload_dto import (
    ChunkUploadResponse,
    FinalizeUploadResponse,
    ImageUploadResponse,
    InitiateUploadRequest,
    InitiateUploadResponse,
    UploadStatusResponse
)
from src.core import config

router = APIRouter(prefix="/v1/api/uploads")


def _check_size(size: int, limit_mb: int, label: str) -> None:
    max_size_bytes = limit_mb * 1024 * 1024
    if size > max_size_bytes:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"{label} size ({size / (1024 * 1024):.2f}MB) exceeds maximum allowed size of {limit_mb}MB"
        )


@router.post("/sessions", tags=["Chunked Uploads"], response_model=InitiateUploadResponse, status_code=status.HTTP_201_CREATED)
async def initiate_upload(
    request: InitiateUploadRequest,
    upload_service: UploadService = Depends(get_upload_service),
    username: str = Depends(verify_token)
):
    """
    Open a chunked upload session.

    - **file_name**: Name the final artifact will be stored under
    - **total_chunks**: Number of chunks that will be sent (indices 0..total_chunks-1)
    - **file_size**: Expected total size in bytes
    """
    return upload_service.initiate_upload(request.file_name, request.total_chunks, request.file_size)


@router.get("/sessions/{session_id}", tags=["Chunked Uploads"], response_model=UploadStatusResponse)
async def get_upload_status(
    session_id: str,
    upload_service: UploadService = Depends(get_upload_service),
    username: str = Depends(verify_token)
):
    """
    Get the progress of an upload session.

    A 404 after a failed or expired session means the upload must be restarted.
    """
    return upload_service.get_upload_status(session_id)


@router.put("/sessions/{session_id}/chunks/{chunk_index}", tags=["Chunked Uploads"], response_model=ChunkUploadResponse)
async def upload_chunk(
    request: Request,
    session_id: str,
    chunk_index: int = Path(..., ge=0, description="Zero-based chunk index"),
    upload_service: UploadService = Depends(get_upload_service),
    username: str = Depends(verify_token)
):
    """
    Upload one chunk as the raw request body.

    Re-sending a chunk that was already stored is acknowledged without a second write.
    """
    chunk = await request.body()
    if not chunk:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Chunk body cannot be empty"
        )
    _check_size(len(chunk), config.settings.max_chunk_size_mb, "Chunk")

    return await upload_service.upload_chunk(session_id, chunk_index, chunk)


@router.post("/sessions/{session_id}/finalize", tags=["Chunked Uploads"], response_model=FinalizeUploadResponse)
async def finalize_upload(
    session_id: str,
    upload_service: UploadService = Depends(get_upload_service),
    username: str = Depends(verify_token)
):
    """
    Reassemble every chunk into the final file.

    A failure here is terminal for the session; start a new upload to retry.
    """
    return await upload_service.finalize_upload(session_id)


@router.post("/images", tags=["Images"], response_model=ImageUploadResponse, status_code=status.HTTP_201_CREATED)
async def upload_image(
    file: UploadFile = File(..., description="Image file"),
    file_name: str = Form(..., description="File name to store the image under"),
    media_kind: str = Form(..., description="'thumbnail' or 'image'"),
    upload_service: UploadService = Depends(get_upload_service),
    username: str = Depends(verify_token)
):
    """
    Upload a thumbnail or image in a single request.
    """
    content = await file.read()
    _check_size(len(content), config.settings.max_image_size_mb, "Image")

    return await upload_service.upload_image(content, file_name, media_kind, file.content_type)
