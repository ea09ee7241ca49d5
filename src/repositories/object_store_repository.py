"""
Abstract base class for CDN object store repositories.
Defines the contract for storing named byte blobs at a path.
"""
from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, NamedTuple


class StoredObject(NamedTuple):
    """One listed blob."""
    path: str
    size: int
    last_modified: datetime


class ObjectStoreRepository(ABC):
    """Abstract repository interface for blob storage operations."""

    @abstractmethod
    def put(self, path: str, data: bytes, content_type: str = "application/octet-stream") -> None:
        """Store bytes at path, overwriting any existing blob."""
        pass

    @abstractmethod
    def put_file(self, path: str, local_path: str, content_type: str = "application/octet-stream") -> None:
        """Stream a local file to path."""
        pass

    @abstractmethod
    def get(self, path: str) -> bytes:
        """Fetch the blob stored at path."""
        pass

    @abstractmethod
    def delete(self, path: str) -> None:
        """
        Delete a blob. A path ending in '/' deletes every blob under that
        prefix; the bulk delete is best-effort and not atomic.
        """
        pass

    @abstractmethod
    def list(self, prefix: str) -> List[StoredObject]:
        """List blobs under prefix."""
        pass
