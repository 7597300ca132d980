"""
API routes for teachers (admin CRUD with photo upload).
"""

import math
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from teacher_admin.core.config import get_config, get_upload_tmp_dir
from teacher_admin.core.database import get_db
from teacher_admin.core.logging import get_logger
from teacher_admin.core.messages import translate
from teacher_admin.models import Teacher
from teacher_admin.schemas import (
    MessageResponse,
    TeacherCreate,
    TeacherListResponse,
    TeacherMutationResponse,
    TeacherResponse,
    TeacherUpdate,
)
from teacher_admin.services.photo_pipeline import PhotoUploadPipeline
from teacher_admin.services.stores import (
    PUBLIC_NAMESPACE,
    LocalBlobStore,
    SqlTeacherStore,
    get_blob_store,
)
from teacher_admin.services.teacher_service import PhotoUploadError, TeacherService
from teacher_admin.services.upload_source import IncomingPhoto, UploadRegistry

logger = get_logger("teachers")

router = APIRouter(prefix="/teachers", tags=["Teachers"])


def get_teacher_store(db: Session = Depends(get_db)) -> SqlTeacherStore:
    return SqlTeacherStore(db)


def get_teacher_service(
    store: SqlTeacherStore = Depends(get_teacher_store),
    blobs: LocalBlobStore = Depends(get_blob_store),
) -> TeacherService:
    """Wire the record store, blob store and photo pipeline for one request."""
    config = get_config()
    pipeline = PhotoUploadPipeline(
        blobs,
        get_logger("photos"),
        namespace=config.storage.photo_namespace,
    )
    return TeacherService(store, blobs, pipeline, logger)


def _teacher_to_response(teacher: Teacher, blobs: LocalBlobStore) -> TeacherResponse:
    return TeacherResponse(
        id=teacher.id,
        name=teacher.name,
        email=teacher.email,
        phone=teacher.phone,
        subject=teacher.subject,
        bio=teacher.bio,
        photo=teacher.photo,
        photo_url=blobs.url(PUBLIC_NAMESPACE, teacher.photo),
        created_at=teacher.created_at,
        updated_at=teacher.updated_at,
    )


def _clean(value: Optional[str]) -> Optional[str]:
    """Treat blank form values as absent."""
    if value is None:
        return None
    value = value.strip()
    return value or None


def _validation_response(errors: Dict[str, List[str]], submitted: Dict[str, Any]) -> JSONResponse:
    """422 with per-field messages and the submitted input, so the form can be refilled."""
    return JSONResponse(status_code=422, content={"detail": errors, "input": submitted})


def _form_errors(error: ValidationError) -> Dict[str, List[str]]:
    errors: Dict[str, List[str]] = {}
    for item in error.errors():
        field = str(item["loc"][0]) if item.get("loc") else "__all__"
        errors.setdefault(field, []).append(item["msg"])
    return errors


def _photo_errors(upload: Optional[IncomingPhoto]) -> Dict[str, List[str]]:
    """Extension and size rules for the photo field."""
    if upload is None or not upload.is_valid:
        return {}
    upload_config = get_config().upload
    allowed = [ext.lower() for ext in upload_config.allowed_extensions]
    messages = []
    if upload.client_extension.lower() not in allowed:
        messages.append(translate("photo_bad_extension", extensions=", ".join(allowed)))
    if upload.size > upload_config.max_size_mb * 1024 * 1024:
        messages.append(translate("photo_too_large", max_kb=upload_config.max_size_mb * 1024))
    return {"photo": messages} if messages else {}


@contextmanager
def staged_photo(photo: Optional[UploadFile]) -> Iterator[Optional[IncomingPhoto]]:
    """
    Stage the submitted photo for the duration of the request.

    Yields None when no file was chosen. Staged files that were not moved into
    storage are removed afterwards.
    """
    if photo is None or not photo.filename:
        yield None
        return
    registry = UploadRegistry()
    try:
        yield IncomingPhoto.from_upload_file(photo, get_upload_tmp_dir(), registry)
    finally:
        registry.cleanup()


def _conflict(store: SqlTeacherStore, e: IntegrityError) -> HTTPException:
    store.db.rollback()
    logger.warning(f"Teacher write rejected by the database: {e.orig}")
    return HTTPException(status_code=409, detail=translate("teacher_conflict"))


def _get_or_404(store: SqlTeacherStore, teacher_id: int) -> Teacher:
    teacher = store.get(teacher_id)
    if not teacher:
        raise HTTPException(status_code=404, detail=translate("teacher_not_found"))
    return teacher


@router.get("", response_model=TeacherListResponse)
def list_teachers(
    page: int = Query(1, ge=1, description="Page number (1-based)"),
    per_page: Optional[int] = Query(None, ge=1, le=100, description="Items per page"),
    store: SqlTeacherStore = Depends(get_teacher_store),
    blobs: LocalBlobStore = Depends(get_blob_store),
):
    """List teachers, latest first."""
    per_page = per_page or get_config().app.per_page
    items, total = store.paginate(page, per_page)
    return TeacherListResponse(
        items=[_teacher_to_response(t, blobs) for t in items],
        total=total,
        page=page,
        per_page=per_page,
        pages=math.ceil(total / per_page) if total else 0,
    )


@router.get("/{teacher_id}", response_model=TeacherResponse)
def get_teacher(
    teacher_id: int,
    store: SqlTeacherStore = Depends(get_teacher_store),
    blobs: LocalBlobStore = Depends(get_blob_store),
):
    """Get a teacher by ID."""
    return _teacher_to_response(_get_or_404(store, teacher_id), blobs)


@router.post("", response_model=TeacherMutationResponse, status_code=201)
def create_teacher(
    name: str = Form(""),
    email: Optional[str] = Form(None),
    phone: Optional[str] = Form(None),
    subject: Optional[str] = Form(None),
    bio: Optional[str] = Form(None),
    photo: Optional[UploadFile] = File(None),
    store: SqlTeacherStore = Depends(get_teacher_store),
    blobs: LocalBlobStore = Depends(get_blob_store),
    service: TeacherService = Depends(get_teacher_service),
):
    """Create a teacher. A photo that cannot be stored is dropped, not reported."""
    submitted = {"name": name, "email": email, "phone": phone, "subject": subject, "bio": bio}
    try:
        payload = TeacherCreate(
            name=name.strip(),
            email=_clean(email),
            phone=_clean(phone),
            subject=_clean(subject),
            bio=_clean(bio),
        )
    except ValidationError as e:
        return _validation_response(_form_errors(e), submitted)

    with staged_photo(photo) as upload:
        errors = _photo_errors(upload)
        if errors:
            return _validation_response(errors, submitted)
        try:
            teacher = service.create(payload.model_dump(), upload)
        except IntegrityError as e:
            raise _conflict(store, e)

    return TeacherMutationResponse(
        message=translate("teacher_created"),
        teacher=_teacher_to_response(teacher, blobs),
    )


@router.api_route("/{teacher_id}", methods=["PUT", "POST"], response_model=TeacherMutationResponse)
def update_teacher(
    teacher_id: int,
    name: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    phone: Optional[str] = Form(None),
    subject: Optional[str] = Form(None),
    bio: Optional[str] = Form(None),
    photo: Optional[UploadFile] = File(None),
    store: SqlTeacherStore = Depends(get_teacher_store),
    blobs: LocalBlobStore = Depends(get_blob_store),
    service: TeacherService = Depends(get_teacher_service),
):
    """Update a teacher. Omitting the photo keeps the current one."""
    teacher = _get_or_404(store, teacher_id)
    submitted = {"name": name, "email": email, "phone": phone, "subject": subject, "bio": bio}
    try:
        payload = TeacherUpdate(
            name=name.strip() if name is not None else None,
            email=_clean(email),
            phone=_clean(phone),
            subject=_clean(subject),
            bio=_clean(bio),
        )
    except ValidationError as e:
        return _validation_response(_form_errors(e), submitted)

    with staged_photo(photo) as upload:
        errors = _photo_errors(upload)
        if errors:
            return _validation_response(errors, submitted)
        try:
            teacher = service.update(teacher, payload.model_dump(exclude_none=True), upload)
        except PhotoUploadError as e:
            return _validation_response({e.field: [e.message]}, submitted)
        except IntegrityError as e:
            raise _conflict(store, e)

    return TeacherMutationResponse(
        message=translate("teacher_updated"),
        teacher=_teacher_to_response(teacher, blobs),
    )


@router.delete("/{teacher_id}", response_model=MessageResponse)
def delete_teacher(
    teacher_id: int,
    store: SqlTeacherStore = Depends(get_teacher_store),
    service: TeacherService = Depends(get_teacher_service),
):
    """Delete a teacher and their photo."""
    service.delete(_get_or_404(store, teacher_id))
    return MessageResponse(message=translate("teacher_deleted"))
