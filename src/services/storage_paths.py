"""
Remote path layout for the CDN object store.

    {root}/temp_uploads/{session_id}/chunk_{i}.part   chunk blobs
    {root}/uploads/{file_name}                         reassembled artifacts
    {root}/thumbnails/{file_name}, {root}/images/...   direct image uploads

Public URLs swap the storage root for the pull zone host.
"""
from src.core import config
from src.core.exceptions import InvalidMediaKindException, ValidationException
from src.models.file_record import MediaKind

TEMP_UPLOADS_DIR = "temp_uploads"
UPLOADS_DIR = "uploads"

_MEDIA_KIND_DIRS = {
    MediaKind.THUMBNAIL: "thumbnails",
    MediaKind.IMAGE: "images",
}


def ensure_safe_file_name(file_name: str) -> str:
    """
    Reject names that would escape their directory once used as a path segment.

    Raises:
        ValidationException: If the name is empty or contains a path separator
    """
    name = (file_name or "").strip()
    if not name or name in (".", ".."):
        raise ValidationException("File name cannot be empty")
    if "/" in name or "\\" in name:
        raise ValidationException(f"File name '{file_name}' must not contain path separators")
    return name


def parse_media_kind(kind: str) -> MediaKind:
    """Raises InvalidMediaKindException for anything but 'thumbnail' or 'image'."""
    try:
        return MediaKind(kind)
    except ValueError:
        raise InvalidMediaKindException(str(kind)) from None


class StoragePaths:
    """Builds remote paths and public URLs for one storage root."""

    def __init__(self, storage_root: str, pull_zone_host: str):
        self.storage_root = storage_root.strip("/")
        self.pull_zone_host = pull_zone_host.rstrip("/")

    @classmethod
    def from_settings(cls) -> "StoragePaths":
        return cls(config.settings.cdn_storage_root, config.settings.cdn_pull_zone_host)

    @property
    def temp_root(self) -> str:
        return f"{self.storage_root}/{TEMP_UPLOADS_DIR}"

    def temp_dir(self, session_id: str) -> str:
        return f"{self.temp_root}/{session_id}"

    def final_path(self, file_name: str) -> str:
        return f"{self.storage_root}/{UPLOADS_DIR}/{ensure_safe_file_name(file_name)}"

    def image_path(self, kind: MediaKind, file_name: str) -> str:
        return f"{self.storage_root}/{_MEDIA_KIND_DIRS[kind]}/{ensure_safe_file_name(file_name)}"

    def public_url(self, path: str) -> str:
        """Externally resolvable URL for a blob stored under the storage root."""
        prefix = f"{self.storage_root}/"
        relative = path[len(prefix):] if path.startswith(prefix) else path
        return f"{self.pull_zone_host}/{relative}"

    def session_id_from_path(self, path: str):
        """Session id of a temp chunk path, or None for paths outside the temp root."""
        prefix = f"{self.temp_root}/"
        if not path.startswith(prefix):
            return None
        session_id, _, _ = path[len(prefix):].partition("/")
        return session_id or None
