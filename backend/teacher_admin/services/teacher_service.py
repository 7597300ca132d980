"""
Create, update and delete teachers together with their photos.

A record write and a blob write are two independent side effects. The rules
kept here are: a teacher row only ever points at a photo that was stored, an
old photo is removed once it has been replaced, and a failure to remove a blob
never blocks the record operation (an orphaned blob is tolerated).
"""

import logging
from typing import Any, Dict, Optional

from teacher_admin.core.logging import log_event
from teacher_admin.core.messages import translate
from teacher_admin.models import Teacher
from teacher_admin.services.diagnostics import log_upload_diagnostics
from teacher_admin.services.photo_pipeline import (
    Failed,
    MissingTempPathError,
    PhotoStorageError,
    PhotoUploadPipeline,
    Stored,
    UploadOutcome,
    is_sentinel_photo,
)
from teacher_admin.services.stores import BlobStore, RecordStore
from teacher_admin.services.upload_source import IncomingPhoto

PHOTO_FIELD = "photo"


class PhotoUploadError(ValueError):
    """A user-visible validation error attached to the photo field."""

    def __init__(self, message: str, field: str = PHOTO_FIELD):
        super().__init__(message)
        self.field = field
        self.message = message


class TeacherService:
    """Teacher lifecycle operations over a record store and a blob store."""

    def __init__(
        self,
        records: RecordStore,
        blobs: BlobStore,
        pipeline: PhotoUploadPipeline,
        logger: logging.Logger,
    ):
        self.records = records
        self.blobs = blobs
        self.pipeline = pipeline
        self.logger = logger

    def create(self, fields: Dict[str, Any], upload: Optional[IncomingPhoto] = None) -> Teacher:
        """
        Create a teacher, storing the photo if one was submitted.

        Any photo problem degrades to a teacher without a photo.
        """
        data = dict(fields)
        # The photo column is only ever filled from a stored upload
        data.pop(PHOTO_FIELD, None)

        if upload is not None:
            log_upload_diagnostics(self.logger, upload)
            try:
                outcome = self.pipeline.store(upload)
            except PhotoStorageError as e:
                outcome = Failed(str(e))
            self._apply_outcome(data, outcome)

        teacher = self.records.create(data)
        log_event(self.logger, logging.INFO, "Teacher created", {"teacher_id": teacher.id, "photo": teacher.photo})
        return teacher

    def update(
        self,
        teacher: Teacher,
        fields: Dict[str, Any],
        upload: Optional[IncomingPhoto] = None,
    ) -> Teacher:
        """
        Update a teacher, replacing the photo if a new one was submitted.

        Raises:
            PhotoUploadError: If the upload has no usable temp location or could
                not be processed; the record is left untouched.
        """
        data = dict(fields)
        # Without a stored upload the existing photo stays as it is
        data.pop(PHOTO_FIELD, None)

        previous_photo = teacher.photo
        outcome = None
        if upload is not None:
            try:
                outcome = self.pipeline.store(upload)
            except MissingTempPathError as e:
                raise PhotoUploadError(translate("photo_no_temp_path")) from e
            except PhotoStorageError as e:
                raise PhotoUploadError(translate("photo_save_error")) from e
            self._apply_outcome(data, outcome)

        teacher = self.records.update(teacher, data)

        if isinstance(outcome, Stored):
            log_event(
                self.logger,
                logging.INFO,
                "Photo updated",
                {"teacher_id": teacher.id, "path": outcome.path, "size": upload.size},
            )
            if previous_photo and previous_photo != outcome.path:
                self.remove_photo(previous_photo)
        return teacher

    def delete(self, teacher: Teacher) -> None:
        """Delete the teacher's photo (best effort), then the record."""
        if teacher.photo:
            self.remove_photo(teacher.photo)
        teacher_id = teacher.id
        self.records.delete(teacher)
        log_event(self.logger, logging.INFO, "Teacher deleted", {"teacher_id": teacher_id})

    def remove_photo(self, photo: str) -> bool:
        """
        Delete a stored photo blob.

        Leaked staged-upload paths are never passed to the blob store. Failures
        are logged and reported as False.
        """
        if is_sentinel_photo(photo):
            log_event(self.logger, logging.WARNING, "Skipping deletion of temp-path photo value", {"photo": photo})
            return False
        try:
            self.blobs.delete(self.pipeline.disk, photo)
        except Exception as e:
            log_event(
                self.logger,
                logging.WARNING,
                f"Could not delete old photo: {e}",
                {"photo": photo},
                exc_info=e,
            )
            return False
        return True

    def _apply_outcome(self, data: Dict[str, Any], outcome: UploadOutcome) -> None:
        if isinstance(outcome, Stored):
            data[PHOTO_FIELD] = outcome.path
            return
        data.pop(PHOTO_FIELD, None)
        if isinstance(outcome, Failed):
            log_event(self.logger, logging.WARNING, "Photo not stored", {"reason": outcome.reason})
