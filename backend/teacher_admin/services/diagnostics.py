"""
Upload environment diagnostics.

Used for the "Upload diagnostics" log entry written on each create request
carrying a photo, and for the report printed by scripts/debug_photo_upload.py.
"""

import logging
import os
import platform
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional

from teacher_admin.core.config import (
    AppConfig,
    get_config,
    get_data_dir,
    get_public_root,
    get_upload_tmp_dir,
)
from teacher_admin.core.logging import log_event
from teacher_admin.services.upload_source import IncomingPhoto

WRITE_PROBE_NAME = "test.txt"


def upload_environment(config: Optional[AppConfig] = None) -> Dict[str, Any]:
    """Settings that decide where and how uploads are staged."""
    config = config or get_config()
    return {
        "upload_tmp_dir": str(get_upload_tmp_dir()),
        "system_tmp_dir": tempfile.gettempdir(),
        "upload_max_size_mb": config.upload.max_size_mb,
        "allowed_extensions": list(config.upload.allowed_extensions),
        "python": platform.python_version(),
        "platform": platform.platform(),
    }


def log_upload_diagnostics(logger: logging.Logger, upload: Optional[IncomingPhoto]) -> None:
    """Write the upload environment plus the submitted file descriptor at DEBUG."""
    try:
        context = upload_environment()
        context["file"] = upload.describe() if upload is not None else None
        log_event(logger, logging.DEBUG, "Upload diagnostics", context)
    except Exception as e:
        logger.warning(f"Failed to write upload diagnostics: {e}")


def check_path(label: str, path: Path) -> Dict[str, Any]:
    """Existence and writability of one storage directory."""
    exists = path.exists()
    return {
        "label": label,
        "path": str(path),
        "exists": exists,
        "writable": exists and os.access(path, os.W_OK),
    }


def storage_paths(config: Optional[AppConfig] = None) -> List[Dict[str, Any]]:
    config = config or get_config()
    public_root = get_public_root()
    return [
        check_path("data dir", get_data_dir()),
        check_path("public dir", public_root),
        check_path(f"public/{config.storage.photo_namespace}", public_root / config.storage.photo_namespace),
        check_path("upload tmp dir", get_upload_tmp_dir()),
    ]


def ensure_photo_dir(config: Optional[AppConfig] = None) -> bool:
    """
    Create the photo directory if missing.

    Returns:
        True if the directory had to be created.
    """
    config = config or get_config()
    photo_dir = get_public_root() / config.storage.photo_namespace
    if photo_dir.is_dir():
        return False
    photo_dir.mkdir(mode=0o755, parents=True, exist_ok=True)
    return True


def write_test(directory: Path) -> bool:
    """Write and remove a probe file in ``directory``."""
    probe = directory / WRITE_PROBE_NAME
    try:
        probe.write_text("test", encoding="utf-8")
        probe.unlink()
    except OSError:
        return False
    return True
