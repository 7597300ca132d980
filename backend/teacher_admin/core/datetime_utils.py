"""
Utility functions for handling timezone-aware timestamps.
All timestamps use ISO 8601 format with timezone offset: 2026-01-31T10:43:03-05:00
"""

from datetime import datetime, timezone


def get_now_with_timezone() -> datetime:
    """
    Get current time with timezone information.
    Returns timezone-aware datetime in local timezone.
    """
    return datetime.now(timezone.utc).astimezone()


def now_iso() -> str:
    """Current local time as an ISO 8601 string, used for row timestamps."""
    return get_now_with_timezone().isoformat()
