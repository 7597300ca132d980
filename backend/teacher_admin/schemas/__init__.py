"""
Schemas package initialization.
"""

from teacher_admin.schemas.teacher import (
    TeacherBase,
    TeacherCreate,
    TeacherUpdate,
    TeacherResponse,
    TeacherListResponse,
    TeacherMutationResponse,
    MessageResponse,
)

__all__ = [
    "TeacherBase",
    "TeacherCreate",
    "TeacherUpdate",
    "TeacherResponse",
    "TeacherListResponse",
    "TeacherMutationResponse",
    "MessageResponse",
]
