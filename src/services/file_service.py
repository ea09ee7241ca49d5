"""
File Service for local scratch storage.
Manages the per-session directories used to reassemble chunks on disk.
"""
import os
import shutil
import time
from datetime import timedelta
from typing import List, Optional
from src.core import config
from src.core.exceptions import StorageIOException
from src.services.storage_paths import ensure_safe_file_name


class FileService:
    """Service for local filesystem operations."""

    def __init__(self, scratch_root: Optional[str] = None):
        self.scratch_root = os.path.abspath(scratch_root or config.settings.local_scratch_dir)

    def scratch_dir_for(self, session_id: str) -> str:
        return os.path.join(self.scratch_root, session_id)

    def create_scratch_dir(self, session_id: str) -> str:
        """
        Create the scratch directory owned by one finalize call.

        Returns:
            Absolute path of the directory

        Raises:
            StorageIOException: If the directory cannot be created
        """
        path = self.scratch_dir_for(session_id)
        try:
            os.makedirs(path, exist_ok=True)
        except OSError as e:
            raise StorageIOException(f"Failed to create scratch directory {path}: {str(e)}") from e
        return path

    def scratch_file_path(self, scratch_dir: str, file_name: str) -> str:
        return os.path.join(scratch_dir, ensure_safe_file_name(file_name))

    def remove_scratch_dir(self, path: str) -> None:
        """
        Delete a scratch directory tree. Missing directories are ignored.

        Raises:
            StorageIOException: If the tree exists but cannot be removed
        """
        if not os.path.exists(path):
            return
        try:
            shutil.rmtree(path)
        except OSError as e:
            raise StorageIOException(f"Failed to remove scratch directory {path}: {str(e)}") from e

    def list_stale_scratch_dirs(self, max_age: timedelta) -> List[str]:
        """Scratch directories not modified within max_age."""
        if not os.path.isdir(self.scratch_root):
            return []

        cutoff = time.time() - max_age.total_seconds()
        stale = []
        with os.scandir(self.scratch_root) as entries:
            for entry in entries:
                if entry.is_dir(follow_symlinks=False) and entry.stat().st_mtime < cutoff:
                    stale.append(entry.path)
        return stale
