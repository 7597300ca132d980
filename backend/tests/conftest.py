"""
Test configuration and fixtures
"""

import os
import sys
import tempfile
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import pytest

# Add backend to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

# Keep data and logs of the whole session out of the project tree
_SESSION_DIR = tempfile.mkdtemp(prefix="teacher-admin-tests-")
os.environ.setdefault("DATA_DIR", os.path.join(_SESSION_DIR, "data"))
os.environ.setdefault("LOGS_DIR", os.path.join(_SESSION_DIR, "logs"))

from teacher_admin.core.config import AppConfig, StorageConfig, reset_config  # noqa: E402
from teacher_admin.core.database import drop_db, init_db, reset_engine  # noqa: E402
from teacher_admin.models import Teacher  # noqa: E402
from teacher_admin.services.upload_source import (  # noqa: E402
    TEMP_UPLOAD_PREFIX,
    IncomingPhoto,
    UploadRegistry,
)

FACE_BYTES = b"0123456789"
PHOTO_PATH_PATTERN = r"^teachers/\d+_[0-9a-f]{12}\.png$"


class InMemoryBlobStore:
    """BlobStore fake keeping blobs in a dict, with an optional local root for the move fallback."""

    def __init__(self, root: Optional[Path] = None):
        self.blobs: Dict[Tuple[str, str], bytes] = {}
        self.deleted: List[Tuple[str, str]] = []
        self.root = root
        self.fail_put = False
        self.fail_delete = False

    def put(self, namespace: str, path: str, content: bytes) -> None:
        if self.fail_put:
            raise OSError("disk full")
        self.blobs[(namespace, path)] = bytes(content)

    def delete(self, namespace: str, path: str) -> bool:
        self.deleted.append((namespace, path))
        if self.fail_delete:
            raise OSError("permission denied")
        removed = self.blobs.pop((namespace, path), None) is not None
        local = self.local_path(namespace, path)
        if local is not None and local.is_file():
            local.unlink()
            removed = True
        return removed

    def local_path(self, namespace: str, path: str) -> Optional[Path]:
        if self.root is None:
            return None
        return self.root / namespace / path

    def exists(self, namespace: str, path: str) -> bool:
        if (namespace, path) in self.blobs:
            return True
        local = self.local_path(namespace, path)
        return local is not None and local.is_file()

    def read(self, namespace: str, path: str) -> bytes:
        if (namespace, path) in self.blobs:
            return self.blobs[(namespace, path)]
        return self.local_path(namespace, path).read_bytes()


class InMemoryTeacherStore:
    """RecordStore fake."""

    def __init__(self):
        self.rows: Dict[int, Teacher] = {}
        self.updates = 0
        self._next_id = 1

    def create(self, fields):
        teacher = Teacher(id=self._next_id, **fields)
        self.rows[teacher.id] = teacher
        self._next_id += 1
        return teacher

    def update(self, teacher, fields):
        self.updates += 1
        for key, value in fields.items():
            setattr(teacher, key, value)
        return teacher

    def delete(self, teacher):
        self.rows.pop(teacher.id, None)


class PathlessPhoto(IncomingPhoto):
    """An upload whose path accessors both come back empty."""

    def real_path(self) -> str:
        return ""

    def pathname(self) -> str:
        return ""


@pytest.fixture
def blob_store(tmp_path):
    return InMemoryBlobStore(root=tmp_path / "storage")


@pytest.fixture
def record_store():
    return InMemoryTeacherStore()


@pytest.fixture
def make_upload(tmp_path):
    """Factory for staged uploads registered like real request uploads."""
    staging = tmp_path / "staging"
    staging.mkdir()

    def _make(
        content: bytes = FACE_BYTES,
        filename: str = "face.png",
        is_valid: bool = True,
        size: Optional[int] = None,
        registered: bool = True,
        cls=IncomingPhoto,
    ) -> IncomingPhoto:
        fd, staged = tempfile.mkstemp(prefix=TEMP_UPLOAD_PREFIX, dir=str(staging))
        with os.fdopen(fd, "wb") as f:
            f.write(content)
        registry = UploadRegistry()
        if registered:
            registry.register(staged)
        return cls(
            client_filename=filename,
            size=len(content) if size is None else size,
            is_valid=is_valid,
            client_mime="image/png",
            tmp_name=staged,
            registry=registry,
        )

    return _make


@pytest.fixture
def app_env(tmp_path, monkeypatch):
    """Isolated data/log directories, configuration and database for one test."""
    monkeypatch.setenv("DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("LOGS_DIR", str(tmp_path / "logs"))
    config = AppConfig(storage=StorageConfig(upload_tmp_dir=str(tmp_path / "uploads")))
    reset_config(config)
    reset_engine()
    init_db()
    yield config
    drop_db()
    reset_engine()
    reset_config(None)


@pytest.fixture
def client(app_env):
    """Create a test client bound to the isolated environment."""
    from fastapi.testclient import TestClient

    from main import create_app

    with TestClient(create_app()) as test_client:
        yield test_client


@pytest.fixture
def public_root(app_env):
    from teacher_admin.core.config import get_public_root

    return get_public_root()
