"""
Models package initialization.
"""

from teacher_admin.models.teacher import Teacher

__all__ = [
    "Teacher",
]
