"""
Photo persistence for teacher records.

Takes an incoming photo field, stores its bytes in the public namespace under a
unique name and reports what happened as an UploadOutcome. Storing the bytes
is tried two ways: read the staged file and ``put`` it through the blob store,
and if that fails move the staged upload straight into the public directory.
"""

import logging
import os
import secrets
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Union

from teacher_admin.core.logging import log_event
from teacher_admin.services.stores import PUBLIC_NAMESPACE, BlobStore
from teacher_admin.services.upload_source import TEMP_UPLOAD_PREFIX, IncomingPhoto

DEFAULT_PHOTO_NAMESPACE = "teachers"


@dataclass(frozen=True)
class Stored:
    """The photo was written; ``path`` is relative to the public namespace."""

    path: str
    strategy: str = "direct"


@dataclass(frozen=True)
class Skipped:
    """Nothing to store: no file, or the file field reported itself unusable."""

    reason: str


@dataclass(frozen=True)
class Failed:
    """A photo was submitted but could not be stored."""

    reason: str


UploadOutcome = Union[Stored, Skipped, Failed]


class PhotoStorageError(Exception):
    """An upload could not be processed at all (as opposed to a failed write)."""


class MissingTempPathError(PhotoStorageError):
    """Neither path accessor of the upload gives a usable location."""


def is_sentinel_photo(value: Optional[str]) -> bool:
    """True for photo values that are a leaked staged-upload path rather than a stored blob."""
    return bool(value) and TEMP_UPLOAD_PREFIX in value


def _random_suffix() -> str:
    return secrets.token_hex(6)


class PhotoUploadPipeline:
    """
    Stores uploaded photos in the public namespace.

    Args:
        blob_store: Where photos are written.
        logger: Receives one entry per decision (rejection, fallback, success, failure).
        namespace: Directory under the public root holding the photos.
        disk: Blob store namespace the photos are written to.
        clock: Returns the current Unix time.
        token: Returns the random hex part of generated filenames.
    """

    def __init__(
        self,
        blob_store: BlobStore,
        logger: logging.Logger,
        namespace: str = DEFAULT_PHOTO_NAMESPACE,
        disk: str = PUBLIC_NAMESPACE,
        clock: Callable[[], float] = time.time,
        token: Callable[[], str] = _random_suffix,
    ):
        self.blob_store = blob_store
        self.logger = logger
        self.namespace = namespace.strip("/")
        self.disk = disk
        self.clock = clock
        self.token = token

    def accepts(self, upload: Optional[IncomingPhoto]) -> bool:
        """Whether the field carries something worth storing. Rejections are logged."""
        if upload is None:
            return False
        if not upload.is_valid or upload.size <= 0:
            log_event(
                self.logger,
                logging.INFO,
                "Photo upload rejected",
                {"is_valid": upload.is_valid, "size": upload.size, "client_name": upload.client_filename},
            )
            return False
        return True

    def resolve_source(self, upload: IncomingPhoto) -> str:
        """
        Pick the location to read the uploaded bytes from.

        Raises:
            MissingTempPathError: If both the real path and the pathname are empty.
        """
        source = upload.real_path() or upload.pathname()
        if not source:
            log_event(self.logger, logging.ERROR, "Uploaded file has no temp path", upload.describe())
            raise MissingTempPathError("upload has no usable temporary location")
        return source

    def generate_path(self, upload: IncomingPhoto) -> str:
        """``<namespace>/<unix time>_<12 hex>.<client extension>``"""
        filename = f"{int(self.clock())}_{self.token()}"
        extension = upload.client_extension
        if extension:
            filename = f"{filename}.{extension}"
        return f"{self.namespace}/{filename}"

    def store(self, upload: Optional[IncomingPhoto]) -> UploadOutcome:
        """
        Store an uploaded photo.

        Returns:
            Skipped when there is nothing to store, Stored on success and Failed
            when both storage strategies fail.

        Raises:
            MissingTempPathError: If the upload has no usable source location.
            PhotoStorageError: For any other unexpected error; the cause is chained.
        """
        if upload is None:
            return Skipped("no file")
        if not self.accepts(upload):
            return Skipped("invalid or empty file")

        source = self.resolve_source(upload)
        try:
            relative_path = self.generate_path(upload)
            if os.path.isfile(source) and os.access(source, os.R_OK):
                return self._store_from_source(upload, source, relative_path)
            return self._move_fallback(upload, relative_path, "no readable source")
        except Exception as e:
            log_event(
                self.logger,
                logging.ERROR,
                f"Photo upload exception: {e}",
                upload.describe(),
                exc_info=e,
            )
            raise PhotoStorageError(str(e)) from e

    def _read(self, source: str) -> Optional[bytes]:
        try:
            with open(source, "rb") as f:
                return f.read()
        except OSError as e:
            log_event(self.logger, logging.WARNING, "Could not read uploaded file", {"source": source, "error": str(e)})
            return None

    def _store_from_source(self, upload: IncomingPhoto, source: str, relative_path: str) -> UploadOutcome:
        contents = self._read(source)
        if not contents:
            return self._move_fallback(upload, relative_path, "read failed")

        try:
            self.blob_store.put(self.disk, relative_path, contents)
        except Exception as e:
            log_event(
                self.logger,
                logging.ERROR,
                f"Direct photo write failed: {e}",
                {"path": relative_path, "size": upload.size},
                exc_info=e,
            )
            return self._move_fallback(upload, relative_path, "write failed")

        log_event(
            self.logger,
            logging.INFO,
            "Photo uploaded via direct read/write",
            {"path": relative_path, "size": upload.size},
        )
        return Stored(relative_path, "direct")

    def _move_fallback(self, upload: IncomingPhoto, relative_path: str, cause: str) -> UploadOutcome:
        """Move the staged upload itself into the public directory."""
        if not upload.is_uploaded_artifact():
            log_event(
                self.logger,
                logging.WARNING,
                f"Photo not stored ({cause}) and no staged upload available",
                {"tmp": upload.pathname(), "path": relative_path},
            )
            return Failed(f"{cause}; no staged upload to move")

        destination = self.blob_store.local_path(self.disk, relative_path)
        if destination is None:
            log_event(
                self.logger,
                logging.WARNING,
                f"Photo not stored ({cause}) and blob store has no local directory",
                {"path": relative_path},
            )
            return Failed(f"{cause}; fallback move unavailable")

        destination = Path(destination)
        try:
            destination.parent.mkdir(mode=0o755, parents=True, exist_ok=True)
            moved = upload.move_to(destination)
        except OSError as e:
            log_event(
                self.logger,
                logging.WARNING,
                f"Fallback move failed ({cause}): {e}",
                {"tmp": upload.pathname(), "dest": str(destination)},
            )
            return Failed(f"{cause}; fallback move failed")

        if not moved:
            log_event(
                self.logger,
                logging.WARNING,
                f"Fallback move failed ({cause})",
                {"tmp": upload.pathname(), "dest": str(destination)},
            )
            return Failed(f"{cause}; fallback move failed")

        log_event(
            self.logger,
            logging.INFO,
            f"Photo uploaded via staged file fallback ({cause})",
            {"dest": str(destination), "path": relative_path},
        )
        return Stored(relative_path, "move")
