"""
Upload Session Store.
Registry of in-flight upload sessions keyed by session id.
"""
import threading
import uuid
from datetime import datetime
from abc import ABC, abstractmethod
from typing import Dict, List, Optional
from src.core.exceptions import SessionNotFoundException
from src.models.file_record import UploadedFileRecord
from src.models.upload_session import UploadSession, UploadStatus
from src.services.storage_paths import StoragePaths, ensure_safe_file_name


class SessionStore(ABC):
    """
    Abstract session store.

    Implementations must be safe for concurrent readers and writers. Every
    lookup-based operation raises SessionNotFoundException for unknown ids.
    """

    @abstractmethod
    def create_session(self, file_name: str, total_chunks: int, file_size: int) -> UploadSession:
        """Open a new session in the initiated state."""
        pass

    @abstractmethod
    def get_session(self, session_id: str) -> UploadSession:
        """Return a snapshot of the session."""
        pass

    @abstractmethod
    def mark_chunk_uploaded(self, session_id: str, chunk_index: int) -> None:
        """Record a chunk index; no-op if already recorded."""
        pass

    @abstractmethod
    def set_status(self, session_id: str, status: UploadStatus) -> None:
        """Overwrite the status; callers keep transitions forward-only."""
        pass

    @abstractmethod
    def compare_and_set_status(self, session_id: str, expected: UploadStatus, new: UploadStatus) -> bool:
        """Atomically move from expected to new; False if the current status differs."""
        pass

    @abstractmethod
    def set_artifact(self, session_id: str, record: UploadedFileRecord, download_url: str) -> None:
        pass

    @abstractmethod
    def remove_session(self, session_id: str) -> None:
        pass

    @abstractmethod
    def list_uploaded_indices(self, session_id: str) -> List[int]:
        """Uploaded chunk indices in ascending order."""
        pass

    @abstractmethod
    def list_sessions(self) -> List[UploadSession]:
        pass


class InMemorySessionStore(SessionStore):
    """Process-local session store backed by a lock-guarded dict."""

    def __init__(self, paths: Optional[StoragePaths] = None):
        self.paths = paths or StoragePaths.from_settings()
        self._sessions: Dict[str, UploadSession] = {}
        self._lock = threading.Lock()

    def create_session(self, file_name: str, total_chunks: int, file_size: int) -> UploadSession:
        file_name = ensure_safe_file_name(file_name)
        session_id = str(uuid.uuid4())
        session = UploadSession(
            session_id=session_id,
            file_name=file_name,
            total_chunks=total_chunks,
            file_size=file_size,
            temp_path=self.paths.temp_dir(session_id),
            final_path=self.paths.final_path(file_name)
        )
        with self._lock:
            self._sessions[session_id] = session
            return self._copy(session)

    def get_session(self, session_id: str) -> UploadSession:
        with self._lock:
            return self._copy(self._require(session_id))

    def mark_chunk_uploaded(self, session_id: str, chunk_index: int) -> None:
        with self._lock:
            session = self._require(session_id)
            session.uploaded_chunks.add(chunk_index)
            session.updated_at = datetime.utcnow()

    def set_status(self, session_id: str, status: UploadStatus) -> None:
        with self._lock:
            session = self._require(session_id)
            session.status = status
            session.updated_at = datetime.utcnow()

    def compare_and_set_status(self, session_id: str, expected: UploadStatus, new: UploadStatus) -> bool:
        with self._lock:
            session = self._require(session_id)
            if session.status != expected:
                return False
            session.status = new
            session.updated_at = datetime.utcnow()
            return True

    def set_artifact(self, session_id: str, record: UploadedFileRecord, download_url: str) -> None:
        with self._lock:
            session = self._require(session_id)
            session.artifact = record
            session.download_url = download_url
            session.updated_at = datetime.utcnow()

    def remove_session(self, session_id: str) -> None:
        with self._lock:
            self._sessions.pop(session_id, None)

    def list_uploaded_indices(self, session_id: str) -> List[int]:
        with self._lock:
            return sorted(self._require(session_id).uploaded_chunks)

    def list_sessions(self) -> List[UploadSession]:
        with self._lock:
            return [self._copy(session) for session in self._sessions.values()]

    def _require(self, session_id: str) -> UploadSession:
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundException(session_id)
        return session

    def _copy(self, session: UploadSession) -> UploadSession:
        # Callers get snapshots; the only way to mutate is through the store.
        return UploadSession(
            session_id=session.session_id,
            file_name=session.file_name,
            total_chunks=session.total_chunks,
            file_size=session.file_size,
            temp_path=session.temp_path,
            final_path=session.final_path,
            status=session.status,
            uploaded_chunks=set(session.uploaded_chunks),
            artifact=session.artifact,
            download_url=session.download_url,
            created_at=session.created_at,
            updated_at=session.updated_at
        )
