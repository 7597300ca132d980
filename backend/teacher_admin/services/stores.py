"""
Record and blob stores used by the teacher services.

Both are small protocols so the photo pipeline can run against in-memory fakes
in tests and against SQLAlchemy / the local public directory in the app.
"""

import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol, Tuple

from sqlalchemy.orm import Session

from teacher_admin.core.config import get_config, get_public_root
from teacher_admin.core.logging import get_logger
from teacher_admin.models import Teacher

PUBLIC_NAMESPACE = "public"


class BlobStoreError(RuntimeError):
    """Raised when a blob cannot be written."""


class RecordStore(Protocol):
    """Persistence for teacher rows."""

    def create(self, fields: Dict[str, Any]) -> Teacher: ...

    def update(self, teacher: Teacher, fields: Dict[str, Any]) -> Teacher: ...

    def delete(self, teacher: Teacher) -> None: ...


class BlobStore(Protocol):
    """Named binary objects grouped by namespace."""

    def put(self, namespace: str, path: str, content: bytes) -> None: ...

    def delete(self, namespace: str, path: str) -> bool: ...

    def local_path(self, namespace: str, path: str) -> Optional[Path]: ...


class SqlTeacherStore:
    """RecordStore backed by a SQLAlchemy session."""

    def __init__(self, db: Session):
        self.db = db

    def _assign(self, teacher: Teacher, fields: Dict[str, Any]) -> None:
        for key, value in fields.items():
            if key in Teacher.FILLABLE:
                setattr(teacher, key, value)

    def get(self, teacher_id: int) -> Optional[Teacher]:
        return self.db.query(Teacher).filter(Teacher.id == teacher_id).first()

    def paginate(self, page: int, per_page: int) -> Tuple[List[Teacher], int]:
        """Return one page of teachers, latest first, and the total count."""
        query = self.db.query(Teacher)
        total = query.count()
        items = (
            query.order_by(Teacher.created_at.desc(), Teacher.id.desc())
            .offset((page - 1) * per_page)
            .limit(per_page)
            .all()
        )
        return items, total

    def create(self, fields: Dict[str, Any]) -> Teacher:
        teacher = Teacher()
        self._assign(teacher, fields)
        self.db.add(teacher)
        self.db.commit()
        self.db.refresh(teacher)
        return teacher

    def update(self, teacher: Teacher, fields: Dict[str, Any]) -> Teacher:
        self._assign(teacher, fields)
        self.db.commit()
        self.db.refresh(teacher)
        return teacher

    def delete(self, teacher: Teacher) -> None:
        self.db.delete(teacher)
        self.db.commit()


class LocalBlobStore:
    """
    BlobStore writing to local directories, one root per namespace.

    Paths are relative to the namespace root and may not escape it.
    """

    def __init__(self, roots: Dict[str, Path], url_prefixes: Optional[Dict[str, str]] = None):
        self.roots = {name: Path(root) for name, root in roots.items()}
        self.url_prefixes = url_prefixes or {}
        self.logger = get_logger("storage")

    def _resolve(self, namespace: str, path: str) -> Path:
        if namespace not in self.roots:
            raise BlobStoreError(f"Unknown storage namespace: {namespace}")
        root = self.roots[namespace].resolve()
        target = (root / path).resolve()
        if target != root and root not in target.parents:
            raise BlobStoreError(f"Path escapes the {namespace} namespace: {path}")
        return target

    def local_path(self, namespace: str, path: str) -> Optional[Path]:
        return self._resolve(namespace, path)

    def put(self, namespace: str, path: str, content: bytes) -> None:
        target = self._resolve(namespace, path)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            with open(target, "wb") as f:
                f.write(content)
        except OSError as e:
            raise BlobStoreError(f"Could not write {namespace}:{path}: {e}") from e
        self.logger.debug(f"Stored blob {namespace}:{path} ({len(content)} bytes)")

    def read(self, namespace: str, path: str) -> bytes:
        with open(self._resolve(namespace, path), "rb") as f:
            return f.read()

    def exists(self, namespace: str, path: str) -> bool:
        return self._resolve(namespace, path).is_file()

    def delete(self, namespace: str, path: str) -> bool:
        """
        Delete a blob.

        Returns:
            True if deleted, False if it did not exist.
        """
        target = self._resolve(namespace, path)
        if not target.is_file():
            return False
        os.remove(target)
        self.logger.info(f"Deleted blob {namespace}:{path}")
        return True

    def url(self, namespace: str, path: Optional[str]) -> Optional[str]:
        """Public URL of a blob, or None when there is no path or no URL mapping."""
        prefix = self.url_prefixes.get(namespace)
        if not path or prefix is None:
            return None
        return f"{prefix.rstrip('/')}/{path.lstrip('/')}"


def get_blob_store() -> LocalBlobStore:
    """Build the blob store for the configured public directory."""
    config = get_config()
    return LocalBlobStore(
        roots={PUBLIC_NAMESPACE: get_public_root()},
        url_prefixes={PUBLIC_NAMESPACE: config.storage.public_url_prefix},
    )
