"""
Incoming photo uploads as seen by the photo pipeline.

FastAPI hands uploads over as ``UploadFile`` objects backed by a spooled
temporary file that may live only in memory. ``IncomingPhoto.from_upload_file``
writes the upload to a named temporary file, the same way a classic web server
stages uploads in its temp directory, and keeps track of it in an
``UploadRegistry`` so the pipeline can later tell a genuine, unconsumed upload
artifact from any other path.
"""

import os
import shutil
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Set

from fastapi import UploadFile

from teacher_admin.core.logging import get_logger

# Prefix of staged upload files; also what a leaked temp path stored as a photo looks like
TEMP_UPLOAD_PREFIX = "upload-tmp-"


class UploadRegistry:
    """
    Staged upload files belonging to the current request.

    A path counts as an uploaded file only while it is registered and still on
    disk; moving it out consumes it.
    """

    def __init__(self):
        self._paths: Set[str] = set()

    def register(self, path: str) -> None:
        self._paths.add(os.path.abspath(path))

    def is_uploaded_file(self, path: Optional[str]) -> bool:
        if not path:
            return False
        path = os.path.abspath(path)
        return path in self._paths and os.path.isfile(path)

    def move_uploaded_file(self, path: str, destination: Path) -> bool:
        """
        Move a registered upload to ``destination``.

        Returns:
            False if ``path`` is not a live upload artifact, True once moved.
        """
        if not self.is_uploaded_file(path):
            return False
        shutil.move(path, str(destination))
        self._paths.discard(os.path.abspath(path))
        return True

    def cleanup(self) -> None:
        """Remove staged files that were not moved into storage."""
        for path in list(self._paths):
            try:
                if os.path.isfile(path):
                    os.remove(path)
            except OSError as e:
                get_logger("uploads").warning(f"Could not remove staged upload {path}: {e}")
            self._paths.discard(path)


@dataclass
class IncomingPhoto:
    """
    A photo file field from the request.

    ``real_path()`` and ``pathname()`` are the two ways of locating the staged
    bytes; either may come back empty.
    """

    client_filename: str
    size: int
    is_valid: bool = True
    client_mime: Optional[str] = None
    tmp_name: Optional[str] = None
    error: Optional[str] = None
    registry: UploadRegistry = field(default_factory=UploadRegistry)

    @property
    def client_extension(self) -> str:
        """Extension from the client-declared filename, without the dot."""
        return Path(self.client_filename or "").suffix.lstrip(".")

    def real_path(self) -> str:
        """Canonical absolute path of the staged file, or "" if it does not exist."""
        if not self.tmp_name or not os.path.exists(self.tmp_name):
            return ""
        return os.path.realpath(self.tmp_name)

    def pathname(self) -> str:
        """Raw staged path as recorded at upload time."""
        return self.tmp_name or ""

    def is_uploaded_artifact(self) -> bool:
        return self.registry.is_uploaded_file(self.tmp_name)

    def move_to(self, destination: Path) -> bool:
        return self.registry.move_uploaded_file(self.tmp_name, destination)

    def describe(self) -> Dict[str, Any]:
        """Fields used in diagnostic log entries."""
        return {
            "client_name": self.client_filename,
            "client_mime": self.client_mime,
            "size": self.size,
            "is_valid": self.is_valid,
            "real_path": self.real_path(),
            "pathname": self.pathname(),
            "error": self.error,
        }

    @classmethod
    def from_upload_file(
        cls,
        upload: UploadFile,
        tmp_dir: Path,
        registry: Optional[UploadRegistry] = None,
    ) -> "IncomingPhoto":
        """
        Stage a FastAPI upload on disk.

        A failure while staging does not raise; it yields an invalid
        IncomingPhoto carrying the error text.
        """
        registry = registry or UploadRegistry()
        extension = Path(upload.filename or "").suffix
        staged_path = None
        try:
            with tempfile.NamedTemporaryFile(
                dir=str(tmp_dir), prefix=TEMP_UPLOAD_PREFIX, suffix=extension, delete=False
            ) as staged:
                staged_path = staged.name
                registry.register(staged_path)
                upload.file.seek(0)
                shutil.copyfileobj(upload.file, staged)
                size = staged.tell()
        except OSError as e:
            return cls(
                client_filename=upload.filename or "",
                size=0,
                is_valid=False,
                client_mime=upload.content_type,
                tmp_name=staged_path,
                error=str(e),
                registry=registry,
            )

        return cls(
            client_filename=upload.filename or "",
            size=size,
            is_valid=bool(upload.filename),
            client_mime=upload.content_type,
            tmp_name=staged_path,
            registry=registry,
        )
