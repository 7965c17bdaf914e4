"""Exceptions raised by devlog components.

Components raise these; the command dispatcher is the only place that prints
them and terminates the process.
"""

from typing import Optional


class DevLogError(Exception):
    """Base exception for all devlog errors."""

    def __init__(self, message: str, hint: Optional[str] = None) -> None:
        self.message = message
        self.hint = hint
        super().__init__(message)


class ConfigurationError(DevLogError):
    """Raised when the configuration is unusable or cannot be written."""


class GitError(DevLogError):
    """Raised when commit metadata cannot be read from git."""


class EntryError(DevLogError):
    """Raised when a log entry fails validation."""


class HookInstallError(DevLogError):
    """Raised when the post-commit hook cannot be installed."""


class APIError(DevLogError):
    """Raised when the logging service rejects or cannot receive an entry."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        body: Optional[str] = None,
        hint: Optional[str] = None,
    ) -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(message, hint=hint)
