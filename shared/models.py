"""
Data models for devlog.

This module provides:
- The persisted user configuration (camelCase JSON on disk)
- The transient log entry sent to the logging service
- The service's append response
- Hook installation results
"""

from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Optional, Dict, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

DATE_FORMAT = "%Y-%m-%d"


class DevLogConfig(BaseModel):
    """User configuration stored in the devlog JSON file."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    api_key: Optional[str] = Field(default=None, alias="apiKey", description="API key")
    api_base_url: Optional[str] = Field(
        default=None, alias="apiBaseUrl", description="Logging service base URL"
    )
    include_commit_hash: bool = Field(
        default=True, alias="includeCommitHash", description="Prefix entries with the short hash"
    )
    include_date: bool = Field(
        default=True, alias="includeDate", description="Send today's date with entries"
    )

    @field_validator("api_key", "api_base_url")
    @classmethod
    def blank_to_none(cls, v):
        if v is not None and not v.strip():
            return None
        return v

    def masked_api_key(self) -> Optional[str]:
        """Return the first 8 characters of the API key for display."""
        if not self.api_key:
            return None
        return f"{self.api_key[:8]}..."

    def to_json_dict(self) -> Dict[str, Any]:
        """Serialize with the on-disk camelCase keys."""
        return self.model_dump(by_alias=True, exclude_none=True)


class LogEntry(BaseModel):
    """A single entry submitted to the remote log."""

    text: str = Field(..., description="Formatted entry text")
    date: Optional[str] = Field(default=None, description="Entry date (YYYY-MM-DD)")

    @field_validator("text")
    @classmethod
    def validate_text(cls, v):
        if not v or not v.strip():
            raise ValueError("Log entry text cannot be empty")
        return v

    @field_validator("date")
    @classmethod
    def validate_date(cls, v):
        if v is None:
            return v
        try:
            # strptime also accepts unpadded fields such as 2025-1-1
            well_formed = datetime.strptime(v, DATE_FORMAT).strftime(DATE_FORMAT) == v
        except ValueError:
            well_formed = False
        if not well_formed:
            raise ValueError(f"Date must be in YYYY-MM-DD format, got {v!r}")
        return v

    def to_payload(self) -> Dict[str, Any]:
        """Request body; an absent date is omitted."""
        return self.model_dump(exclude_none=True)


class AppendResponse(BaseModel):
    """Body returned by the logging service on success."""

    model_config = ConfigDict(extra="allow")

    message: Optional[str] = Field(default=None, description="Human-readable status")


class HookInstallStatus(Enum):
    """Outcome of a hook installation."""
    INSTALLED = "installed"
    ALREADY_INTEGRATED = "already_integrated"
    EXISTING_HOOK = "existing_hook"


class HookInstallResult(BaseModel):
    """Result of installing the post-commit hook."""

    status: HookInstallStatus
    hook_path: Path
    backup_path: Optional[Path] = None

    @property
    def installed(self) -> bool:
        return self.status == HookInstallStatus.INSTALLED
