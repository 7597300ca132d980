"""
Services package initialization.
"""

from teacher_admin.services.photo_pipeline import (
    PhotoUploadPipeline,
    PhotoStorageError,
    MissingTempPathError,
    Stored,
    Skipped,
    Failed,
    is_sentinel_photo,
)
from teacher_admin.services.stores import (
    PUBLIC_NAMESPACE,
    BlobStore,
    BlobStoreError,
    LocalBlobStore,
    RecordStore,
    SqlTeacherStore,
    get_blob_store,
)
from teacher_admin.services.teacher_service import PhotoUploadError, TeacherService
from teacher_admin.services.upload_source import IncomingPhoto, UploadRegistry, TEMP_UPLOAD_PREFIX

__all__ = [
    "PhotoUploadPipeline",
    "PhotoStorageError",
    "MissingTempPathError",
    "Stored",
    "Skipped",
    "Failed",
    "is_sentinel_photo",
    "PUBLIC_NAMESPACE",
    "BlobStore",
    "BlobStoreError",
    "LocalBlobStore",
    "RecordStore",
    "SqlTeacherStore",
    "get_blob_store",
    "PhotoUploadError",
    "TeacherService",
    "IncomingPhoto",
    "UploadRegistry",
    "TEMP_UPLOAD_PREFIX",
]
