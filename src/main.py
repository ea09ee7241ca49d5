"""
Main FastAPI application entry point.
Configures and initializes the Media Upload API.
"""
import asyncio
import logging
from contextlib import asynccontextmanager, suppress
from fastapi import FastAPI, Request
from mangum import Mangum
from src.core.config import settings
from src.core.dependencies import get_cleanup_service
from src.core.exception_handler import register_exception_handlers
from src.api.routes import health_routes, upload_routes

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Scratch directories left behind by a previous process
    cleanup_service = get_cleanup_service()
    removed = cleanup_service.sweep_local_scratch()
    if removed:
        logger.info("Removed %d stale scratch directories on startup", removed)

    # Background eviction of abandoned and expired sessions
    eviction_task = asyncio.create_task(
        cleanup_service.evict_sessions_periodically(settings.session_eviction_interval_seconds)
    )
    app.state.session_eviction_task = eviction_task

    yield

    # Cleanup
    eviction_task.cancel()
    with suppress(asyncio.CancelledError):
        await eviction_task


# Create FastAPI application
app = FastAPI(
    title=settings.api_title,
    version=settings.api_version,
    description="Chunked media upload service backed by a CDN object store",
    root_path=f"/{settings.environment}",
    lifespan=lifespan
)

# Register exception handlers
register_exception_handlers(app)

# Register routes
app.include_router(health_routes.router)
app.include_router(upload_routes.router)

# Middleware to log request paths
@app.middleware("http")
async def log_request(request: Request, call_next):
    logger.info("%s %s", request.method, request.url.path)
    response = await call_next(request)
    return response

# Lambda handler for AWS
handler = Mangum(app, lifespan="off")


# For local development
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
