"""
Core configuration module for the Teacher Admin backend.
Loads configuration from YAML file and environment variables.
"""

import os
import tempfile
from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import BaseModel
from pydantic_settings import BaseSettings, SettingsConfigDict


class ServerConfig(BaseModel):
    """Server configuration."""

    host: str = "0.0.0.0"
    port: int = 8090
    debug: bool = False


class DatabaseConfig(BaseModel):
    """Database configuration."""

    path: str = "data/teachers.db"
    url: Optional[str] = None


class StorageConfig(BaseModel):
    """Public file storage configuration."""

    public_dir: str = "data/public"
    photo_namespace: str = "teachers"
    public_url_prefix: str = "/storage"
    upload_tmp_dir: Optional[str] = None


class UploadConfig(BaseModel):
    """Photo upload limits."""

    max_size_mb: int = 2
    allowed_extensions: List[str] = ["jpg", "jpeg", "png", "gif", "webp"]


class LoggingConfig(BaseModel):
    """Logging configuration."""

    file: str = "app.log"
    level: str = os.getenv("LOG_LEVEL", "DEBUG")
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    max_size: int = 10  # MB
    backup_count: int = 5


class ApplicationConfig(BaseModel):
    """User-facing application settings."""

    name: str = "Teacher Admin"
    locale: str = "en"
    per_page: int = 10


class AppConfig(BaseModel):
    """Main application configuration."""

    server: ServerConfig = ServerConfig()
    database: DatabaseConfig = DatabaseConfig()
    storage: StorageConfig = StorageConfig()
    upload: UploadConfig = UploadConfig()
    logging: LoggingConfig = LoggingConfig()
    app: ApplicationConfig = ApplicationConfig()


class EnvironmentSettings(BaseSettings):
    """
    Environment overrides.

    TEACHER_ADMIN_CONFIG points at the YAML file, DATA_DIR and LOGS_DIR relocate
    the data and log directories (container mode).
    """

    model_config = SettingsConfigDict(extra="ignore")

    teacher_admin_config: Optional[str] = None
    data_dir: Optional[str] = None
    logs_dir: Optional[str] = None


def get_project_root() -> Path:
    """Get the project root directory."""
    return Path(__file__).parent.parent.parent.parent


def load_config(config_path: Optional[str] = None) -> AppConfig:
    """
    Load configuration from YAML file.

    Args:
        config_path: Path to the configuration file. If None, uses default location.

    Returns:
        AppConfig instance with loaded configuration.
    """
    if config_path is None:
        config_path = EnvironmentSettings().teacher_admin_config
        if config_path is None:
            config_path = get_project_root() / "config.yaml"

    config_path = Path(config_path)

    if config_path.exists():
        with open(config_path, "r", encoding="utf-8") as f:
            config_data = yaml.safe_load(f) or {}
            return AppConfig(**config_data)

    return AppConfig()


# Global configuration instance
_config: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reset_config(config: Optional[AppConfig] = None) -> None:
    """Replace (or clear) the cached configuration instance."""
    global _config
    _config = config


def _resolve_data_dir() -> Path:
    """
    Resolve the data directory path.

    Supports two modes:
    1. Container mode: DATA_DIR environment variable is set (e.g., /app/data)
    2. Local development: Uses project root/data
    """
    data_dir_env = EnvironmentSettings().data_dir

    if data_dir_env:
        return Path(data_dir_env).resolve()
    return (get_project_root() / "data").resolve()


def get_data_dir() -> Path:
    """Get the absolute data directory, creating it if needed."""
    data_dir = _resolve_data_dir()
    data_dir.mkdir(parents=True, exist_ok=True)
    return data_dir


def get_public_root() -> Path:
    """
    Get the absolute root of the public storage namespace.

    Only the last component of the configured ``public_dir`` is kept so public
    files always live under the data directory.
    """
    config = get_config()
    subdir = Path(config.storage.public_dir).parts[-1]
    public_root = (_resolve_data_dir() / subdir).resolve()
    public_root.mkdir(parents=True, exist_ok=True)
    return public_root


def get_upload_tmp_dir() -> Path:
    """Get the directory where incoming uploads are spooled to disk."""
    configured = get_config().storage.upload_tmp_dir
    tmp_dir = Path(configured) if configured else Path(tempfile.gettempdir())
    tmp_dir.mkdir(parents=True, exist_ok=True)
    return tmp_dir


def get_database_url() -> str:
    """
    Get the SQLAlchemy database URL.

    An explicit ``database.url`` wins; otherwise a SQLite file named after
    ``database.path`` inside the data directory is used.
    """
    config = get_config()
    if config.database.url:
        return config.database.url

    db_filename = Path(config.database.path).name
    db_path = (_resolve_data_dir() / db_filename).resolve()
    db_path.parent.mkdir(parents=True, exist_ok=True)
    return f"sqlite:///{db_path}"


def get_log_path() -> Path:
    """
    Get the absolute path to the log file.

    Supports both container and local development modes:
    - Container: $LOGS_DIR/app.log
    - Local: project_root/logs/app.log
    """
    config = get_config()

    logs_dir_env = EnvironmentSettings().logs_dir
    if logs_dir_env:
        log_dir = Path(logs_dir_env)
    else:
        log_dir = get_project_root() / "logs"

    log_dir.mkdir(parents=True, exist_ok=True)

    # Use only the filename from config so logs never go outside logs/
    name = Path(config.logging.file).name or "app.log"
    return log_dir / name
