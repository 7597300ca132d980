"""
Pydantic schemas for the Teacher API.
"""

from typing import List, Optional

from pydantic import BaseModel, Field

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class TeacherBase(BaseModel):
    """Base teacher schema."""

    name: str = Field(..., min_length=1, max_length=100)
    email: Optional[str] = Field(None, max_length=100, pattern=EMAIL_PATTERN)
    phone: Optional[str] = Field(None, max_length=30)
    subject: Optional[str] = Field(None, max_length=100)
    bio: Optional[str] = None


class TeacherCreate(TeacherBase):
    """Schema for creating a teacher (photo arrives as a separate file field)."""

    pass


class TeacherUpdate(BaseModel):
    """Schema for updating a teacher. Fields left as None are not changed."""

    name: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[str] = Field(None, max_length=100, pattern=EMAIL_PATTERN)
    phone: Optional[str] = Field(None, max_length=30)
    subject: Optional[str] = Field(None, max_length=100)
    bio: Optional[str] = None


class TeacherResponse(TeacherBase):
    """Teacher response schema."""

    id: int
    email: Optional[str] = None
    photo: Optional[str] = None
    photo_url: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    class Config:
        from_attributes = True


class TeacherListResponse(BaseModel):
    """One page of teachers, latest first."""

    items: List[TeacherResponse]
    total: int
    page: int
    per_page: int
    pages: int


class TeacherMutationResponse(BaseModel):
    """Result of a create or update: notice plus the stored record."""

    message: str
    teacher: TeacherResponse


class MessageResponse(BaseModel):
    """Plain notice."""

    message: str
