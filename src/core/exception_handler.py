"""
Global exception handler for the Media Upload API.
Provides centralized error handling for all API exceptions.
"""
import logging
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from .exceptions import (
    SessionNotFoundException,
    IncompleteUploadException,
    UploadStateConflictException,
    EmptyChunkException,
    EmptyArtifactException,
    InvalidMediaKindException,
    ValidationException,
    StorageIOException,
    FinalizationException,
    DynamoDBException
)

logger = logging.getLogger(__name__)


def _error(status_code: int, title: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": title, "message": message}
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI application."""

    @app.exception_handler(SessionNotFoundException)
    async def handle_session_not_found(request: Request, exc: SessionNotFoundException):
        return _error(404, "Upload Session Not Found", exc.message)

    @app.exception_handler(IncompleteUploadException)
    async def handle_incomplete_upload(request: Request, exc: IncompleteUploadException):
        return JSONResponse(
            status_code=409,
            content={
                "error": "Incomplete Upload",
                "message": exc.message,
                "missing_chunks": exc.missing_chunks
            }
        )

    @app.exception_handler(UploadStateConflictException)
    async def handle_state_conflict(request: Request, exc: UploadStateConflictException):
        return _error(409, "Upload State Conflict", exc.message)

    @app.exception_handler(EmptyChunkException)
    async def handle_empty_chunk(request: Request, exc: EmptyChunkException):
        return _error(422, "Empty Chunk", exc.message)

    @app.exception_handler(EmptyArtifactException)
    async def handle_empty_artifact(request: Request, exc: EmptyArtifactException):
        return _error(422, "Empty Artifact", exc.message)

    @app.exception_handler(InvalidMediaKindException)
    async def handle_invalid_media_kind(request: Request, exc: InvalidMediaKindException):
        return _error(400, "Invalid Media Kind", exc.message)

    @app.exception_handler(ValidationException)
    async def handle_validation_error(request: Request, exc: ValidationException):
        return _error(400, "Validation Error", exc.message)

    @app.exception_handler(StorageIOException)
    async def handle_storage_error(request: Request, exc: StorageIOException):
        return _error(502, "Storage Error", exc.message)

    @app.exception_handler(FinalizationException)
    async def handle_finalization_error(request: Request, exc: FinalizationException):
        return JSONResponse(
            status_code=500,
            content={
                "error": "Finalization Failed",
                "message": exc.message,
                "stage": exc.stage,
                "retryable": False
            }
        )

    @app.exception_handler(DynamoDBException)
    async def handle_dynamodb_error(request: Request, exc: DynamoDBException):
        return _error(500, "Database Error", exc.message)

    @app.exception_handler(Exception)
    async def handle_generic_error(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return _error(500, "Internal Server Error", "An unexpected error occurred")
