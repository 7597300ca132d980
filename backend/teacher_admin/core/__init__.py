"""
Core module initialization.
"""

from teacher_admin.core.config import get_config, load_config, reset_config
from teacher_admin.core.database import get_db, init_db, drop_db, Base
from teacher_admin.core.logging import get_logger, setup_logging, log_event
from teacher_admin.core.messages import translate

__all__ = [
    "get_config",
    "load_config",
    "reset_config",
    "get_db",
    "init_db",
    "drop_db",
    "Base",
    "get_logger",
    "setup_logging",
    "log_event",
    "translate",
]
