"""
Configuration management for the devlog CLI.

This module provides environment-driven settings with:
- Type validation and defaults
- Nested sections for the API, local storage, hooks and logging
- `.env` file support with the ``DEVLOG_`` prefix
"""

from pathlib import Path
from typing import Dict, Any, Optional
from functools import lru_cache

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings as PydanticBaseSettings


class APISettings(BaseModel):
    """Remote logging API settings."""

    default_base_url: str = Field(
        default="http://localhost:3001", description="Base URL used when the config has none"
    )
    append_path: str = Field(default="/api/logs/append", description="Append endpoint path")
    request_timeout: float = Field(default=5.0, gt=0, description="HTTP request timeout")
    retry_attempts: int = Field(default=0, ge=0, le=10, description="Retries on transient errors")
    retry_backoff: float = Field(default=0.5, ge=0, description="Backoff factor in seconds")

    @field_validator("default_base_url")
    @classmethod
    def validate_base_url(cls, v):
        if not v.startswith(("http://", "https://")):
            raise ValueError("API base URL must be HTTP/HTTPS")
        return v.rstrip("/")

    @field_validator("append_path")
    @classmethod
    def validate_append_path(cls, v):
        if not v.startswith("/"):
            raise ValueError("Append path must start with '/'")
        return v


class StorageSettings(BaseModel):
    """Local configuration file settings."""

    config_path: Path = Field(
        default_factory=lambda: Path.home() / ".config" / "devlog.json",
        description="Path of the JSON configuration file",
    )

    @field_validator("config_path")
    @classmethod
    def expand_config_path(cls, v):
        return Path(v).expanduser()


class HookSettings(BaseModel):
    """Git hook installation settings."""

    hook_name: str = Field(default="post-commit", description="Hook file name")
    marker: str = Field(default="devlog", description="Marker identifying an integrated hook")
    backup_suffix: str = Field(default=".backup", description="Suffix for replaced hooks")


class MonitoringSettings(BaseModel):
    """Logging configuration settings."""

    log_level: str = Field(default="WARNING", description="Logging level")
    log_format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log record format",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v.upper()


class Settings(PydanticBaseSettings):
    """
    Main devlog settings.

    Every field can be overridden from the environment, e.g.
    ``DEVLOG_API__RETRY_ATTEMPTS=2`` or ``DEVLOG_STORAGE__CONFIG_PATH=/tmp/devlog.json``.
    """

    app_name: str = Field(default="devlog", description="Application name")
    version: str = Field(default="1.0.0", description="Application version")

    api: APISettings = Field(default_factory=APISettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    hooks: HookSettings = Field(default_factory=HookSettings)
    monitoring: MonitoringSettings = Field(default_factory=MonitoringSettings)

    model_config = {
        "env_prefix": "DEVLOG_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "env_nested_delimiter": "__",
        "extra": "ignore",
    }


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached devlog settings.

    Returns:
        Settings: Application configuration object

    Example:
        >>> settings = get_settings()
        >>> print(settings.storage.config_path)
    """
    return Settings()


# Global settings instance
settings = get_settings()


def validate_configuration(current: Optional[Settings] = None) -> Dict[str, Any]:
    """
    Validate the active settings and return validation results.

    Returns:
        Dict[str, Any]: Validation results with status, errors and warnings
    """
    current = current or get_settings()
    errors = []
    warnings = []

    config_dir = current.storage.config_path.parent
    if config_dir.exists() and not config_dir.is_dir():
        errors.append(f"Configuration directory is not a directory: {config_dir}")

    if not current.storage.config_path.exists():
        warnings.append("No configuration file yet. Run 'devlog config' first.")

    if current.api.retry_attempts and current.api.retry_backoff == 0:
        warnings.append("Retries are enabled without backoff")

    return {
        "valid": len(errors) == 0,
        "errors": errors,
        "warnings": warnings,
        "config_path": str(current.storage.config_path),
    }


def export_config(current: Optional[Settings] = None) -> Dict[str, Any]:
    """
    Export settings for diagnostics.

    Returns:
        Dict[str, Any]: Settings export
    """
    current = current or get_settings()
    return {
        "app_name": current.app_name,
        "version": current.version,
        "api": {
            "default_base_url": current.api.default_base_url,
            "request_timeout": current.api.request_timeout,
            "retry_attempts": current.api.retry_attempts,
        },
        "storage": {"config_path": str(current.storage.config_path)},
        "hooks": {"hook_name": current.hooks.hook_name, "marker": current.hooks.marker},
        "monitoring": {"log_level": current.monitoring.log_level},
    }


if __name__ == "__main__":
    """Configuration validation script."""
    import json

    validation = validate_configuration()
    config_export = export_config()

    print("Configuration Validation:")
    print(json.dumps(validation, indent=2))

    print("\nConfiguration Export:")
    print(json.dumps(config_export, indent=2))

    if not validation["valid"]:
        exit(1)
