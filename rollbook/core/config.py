"""
Core configuration module for Rollbook.
Loads configuration from a YAML file and environment variables.
"""

from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from rollbook.core.exceptions import ConfigurationError


class ServerConfig(BaseModel):
    """HTTP server configuration."""

    host: str = "127.0.0.1"
    port: int = 8090
    debug: bool = False


class StorageConfig(BaseModel):
    """Data file configuration."""

    data_file: str = "data/rollbook.json"


class LoggingConfig(BaseModel):
    """Logging configuration."""

    file: str = "rollbook.log"
    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    max_size: int = 10  # MB
    backup_count: int = 5


class AppConfig(BaseModel):
    """Main application configuration."""

    server: ServerConfig = ServerConfig()
    storage: StorageConfig = StorageConfig()
    logging: LoggingConfig = LoggingConfig()


class EnvironmentSettings(BaseSettings):
    """
    Environment overrides, read from ROLLBOOK_* variables.

    ROLLBOOK_CONFIG points at the YAML file, ROLLBOOK_DATA_DIR and
    ROLLBOOK_LOGS_DIR relocate the data file and log directory, and
    ROLLBOOK_LOG_LEVEL overrides the configured log level.
    """

    model_config = SettingsConfigDict(env_prefix="ROLLBOOK_")

    config: Optional[str] = None
    data_dir: Optional[str] = None
    logs_dir: Optional[str] = None
    log_level: Optional[str] = None


def get_project_root() -> Path:
    """Get the project root directory."""
    return Path(__file__).parent.parent.parent


def load_config(config_path: Optional[str] = None) -> AppConfig:
    """
    Load configuration from YAML file.

    Args:
        config_path: Path to the configuration file. If None, uses ROLLBOOK_CONFIG
            or config.yaml in the project root.

    Returns:
        AppConfig instance with loaded configuration.

    Raises:
        ConfigurationError: If the file exists but is not a valid configuration.
    """
    env = EnvironmentSettings()
    if config_path is None:
        config_path = env.config or str(get_project_root() / "config.yaml")

    path = Path(config_path)
    config = AppConfig()

    if path.exists():
        with open(path, "r", encoding="utf-8") as f:
            try:
                config_data = yaml.safe_load(f) or {}
                config = AppConfig(**config_data)
            except (yaml.YAMLError, ValidationError, TypeError) as e:
                raise ConfigurationError(f"Invalid configuration file {path}: {e}") from e

    if env.log_level:
        config.logging.level = env.log_level
    return config


# Global configuration instance
_config: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reset_config() -> None:
    """Drop the cached configuration so the next get_config() reloads it."""
    global _config
    _config = None


def _resolve_data_dir() -> Path:
    """
    Resolve the data directory path.

    ROLLBOOK_DATA_DIR wins when set; otherwise the directory part of the
    configured data file is taken relative to the project root.
    """
    env = EnvironmentSettings()
    if env.data_dir:
        return Path(env.data_dir).resolve()

    data_file = Path(get_config().storage.data_file)
    if data_file.is_absolute():
        return data_file.parent
    return (get_project_root() / data_file.parent).resolve()


def get_data_file_path() -> Path:
    """
    Get the absolute path to the JSON data file.

    The parent directory is created if missing.
    """
    data_dir = _resolve_data_dir()
    filename = Path(get_config().storage.data_file).name or "rollbook.json"

    data_path = (data_dir / filename).resolve()
    data_path.parent.mkdir(parents=True, exist_ok=True)
    return data_path


def get_log_path() -> Path:
    """
    Get the absolute path to the log file.

    Uses ROLLBOOK_LOGS_DIR when set, otherwise project_root/logs.
    """
    env = EnvironmentSettings()
    log_dir = Path(env.logs_dir) if env.logs_dir else get_project_root() / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)

    # Use only the filename from config so logs never go outside the log dir
    name = Path(get_config().logging.file).name or "rollbook.log"
    return log_dir / name
