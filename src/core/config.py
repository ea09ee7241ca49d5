"""
Core configuration for the Media Upload API.
Manages environment variables, AWS and CDN storage settings.
"""
import os
import logging
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Application settings loaded from environment variables or .env file."""

    # AWS Configuration
    aws_region: str = os.getenv("AWS_REGION", "us-east-1")
    s3_bucket_name: str = os.getenv("S3_BUCKET_NAME", "")
    file_records_table_name: str = os.getenv("FILE_RECORDS_TABLE_NAME", "")

    # CDN storage layout
    cdn_storage_root: str = os.getenv("CDN_STORAGE_ROOT", "media")
    cdn_pull_zone_host: str = os.getenv("CDN_PULL_ZONE_HOST", "https://media.example-cdn.net")
    video_container: str = os.getenv("VIDEO_CONTAINER", "videos/reels")

    # Local reassembly
    local_scratch_dir: str = os.getenv("LOCAL_SCRATCH_DIR", "temp_files")

    # API Configuration
    api_title: str = os.getenv("API_TITLE", "Media Upload API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    # Upload Limits
    max_chunk_size_mb: int = int(os.getenv("MAX_CHUNK_SIZE_MB", "50"))
    max_image_size_mb: int = int(os.getenv("MAX_IMAGE_SIZE_MB", "10"))

    # Reconciliation sweep
    stale_upload_hours: int = int(os.getenv("STALE_UPLOAD_HOURS", "24"))
    completed_session_ttl_minutes: int = int(os.getenv("COMPLETED_SESSION_TTL_MINUTES", "60"))
    session_eviction_interval_seconds: int = int(os.getenv("SESSION_EVICTION_INTERVAL_SECONDS", "300"))

    # Authentication
    jwt_algorithm: str = os.getenv("JWT_ALGORITHM", "HS256")
    use_parameter_store: bool = os.getenv("USE_PARAMETER_STORE", "false").lower() == "true"

    # Environment
    environment: str = os.getenv("ENVIRONMENT", "dev")

    @property
    def jwt_secret_parameter(self) -> str:
        return f"/media-upload-api/{self.environment}/jwt-secret"

    @property
    def jwt_secret(self) -> str:
        """Get JWT secret from Parameter Store, or the environment for local dev."""
        fallback = os.getenv("JWT_SECRET", "dev-secret-change-in-production")
        if not self.use_parameter_store:
            return fallback
        try:
            from src.core.parameter_store import get_parameter
            return get_parameter(self.jwt_secret_parameter, self.aws_region)
        except Exception as e:
            logger.warning("Using fallback JWT secret. Error: %s", e)
            return fallback

    class Config:
        env_file = ".env"
        case_sensitive = False


# Global settings instance
settings = Settings()
