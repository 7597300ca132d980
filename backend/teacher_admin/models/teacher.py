"""
Teacher model for storing teacher records managed from the admin area.
"""

from sqlalchemy import Column, Integer, String, Text

from teacher_admin.core.database import Base
from teacher_admin.core.datetime_utils import now_iso


class Teacher(Base):
    """
    Teacher record.

    ``photo`` is a path relative to the public storage root
    (e.g. ``teachers/1718000000_a1b2c3d4e5f6.png``), or NULL when the teacher
    has no photo.
    """

    __tablename__ = "teachers"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    email = Column(String(100), nullable=True, unique=True)
    phone = Column(String(30), nullable=True)
    subject = Column(String(100), nullable=True)
    bio = Column(Text, nullable=True)
    photo = Column(String(255), nullable=True)
    created_at = Column(String, default=now_iso)
    updated_at = Column(String, default=now_iso, onupdate=now_iso)

    # Columns a caller may set through the record store
    FILLABLE = ("name", "email", "phone", "subject", "bio", "photo")

    def __repr__(self) -> str:
        return f"<Teacher(id={self.id}, name={self.name})>"
