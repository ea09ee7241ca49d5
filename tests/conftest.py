"""
Shared test fixtures and utilities.
"""
import os
import pytest
import jwt
from datetime import datetime, timedelta, timezone
from unittest.mock import Mock
from src.core.exceptions import StorageIOException
from src.repositories.object_store_repository import ObjectStoreRepository, StoredObject
from src.repositories.session_store import InMemorySessionStore
from src.services.file_service import FileService
from src.services.storage_paths import StoragePaths

STORAGE_ROOT = "media"
PULL_ZONE_HOST = "https://cdn.test"


class FakeObjectStore(ObjectStoreRepository):
    """In-memory object store that counts calls and can be told to fail."""

    def __init__(self):
        self.objects = {}
        self.content_types = {}
        self.last_modified = {}
        self.put_calls = 0
        self.get_calls = 0
        self.delete_calls = 0
        self.fail_put = False
        self.fail_put_file = False
        self.fail_delete = False

    def put(self, path, data, content_type="application/octet-stream"):
        self.put_calls += 1
        if self.fail_put:
            raise StorageIOException(f"CDN upload failed for {path}: simulated")
        self._store(path, bytes(data), content_type)

    def put_file(self, path, local_path, content_type="application/octet-stream"):
        if self.fail_put_file:
            raise StorageIOException(f"CDN upload failed for {path}: simulated")
        with open(local_path, "rb") as f:
            self._store(path, f.read(), content_type)

    def get(self, path):
        self.get_calls += 1
        if path not in self.objects:
            raise StorageIOException(f"CDN download failed for {path}: not found")
        return self.objects[path]

    def delete(self, path):
        self.delete_calls += 1
        if self.fail_delete:
            raise StorageIOException(f"CDN delete failed for {path}: simulated")
        if path.endswith("/"):
            for key in [key for key in self.objects if key.startswith(path)]:
                self._drop(key)
        else:
            self._drop(path)

    def list(self, prefix):
        return [
            StoredObject(path=key, size=len(data), last_modified=self.last_modified[key])
            for key, data in sorted(self.objects.items())
            if key.startswith(prefix)
        ]

    def keys_under(self, prefix):
        return sorted(key for key in self.objects if key.startswith(prefix))

    def _store(self, path, data, content_type):
        self.objects[path] = data
        self.content_types[path] = content_type
        self.last_modified[path] = datetime.now(timezone.utc)

    def _drop(self, path):
        self.objects.pop(path, None)
        self.content_types.pop(path, None)
        self.last_modified.pop(path, None)


@pytest.fixture(autouse=True)
def restore_settings():
    """Tests may swap config.settings; put the original back afterwards."""
    from src.core import config
    original = config.settings
    yield
    config.settings = original


@pytest.fixture
def auth_headers():
    """Generate valid JWT token and return authorization headers."""
    # Use same secret as in config
    jwt_secret = "dev-secret-change-in-production"
    jwt_algorithm = "HS256"

    # Create token with 1 hour expiration
    expiration = datetime.utcnow() + timedelta(hours=1)
    payload = {
        "sub": "test_user",
        "exp": expiration,
        "iat": datetime.utcnow()
    }

    token = jwt.encode(payload, jwt_secret, algorithm=jwt_algorithm)

    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def aws_credentials():
    """Mocked AWS credentials for moto."""
    os.environ['AWS_ACCESS_KEY_ID'] = 'testing'
    os.environ['AWS_SECRET_ACCESS_KEY'] = 'testing'
    os.environ['AWS_SECURITY_TOKEN'] = 'testing'
    os.environ['AWS_SESSION_TOKEN'] = 'testing'
    os.environ['AWS_DEFAULT_REGION'] = 'us-east-1'


@pytest.fixture
def storage_paths():
    return StoragePaths(STORAGE_ROOT, PULL_ZONE_HOST)


@pytest.fixture
def session_store(storage_paths):
    return InMemorySessionStore(paths=storage_paths)


@pytest.fixture
def object_store():
    return FakeObjectStore()


@pytest.fixture
def file_service(tmp_path):
    return FileService(scratch_root=str(tmp_path / "scratch"))


@pytest.fixture
def file_record_repository():
    """Mock record repository that echoes the record it is given."""
    repo = Mock()
    repo.create.side_effect = lambda record: record
    return repo
