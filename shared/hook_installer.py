"""
Installation of the devlog git post-commit hook.

An existing hook is never overwritten by :meth:`HookInstaller.install`; only
:meth:`HookInstaller.install_force` replaces it, after copying it to a
``.backup`` sibling.
"""

import logging
import shutil
from pathlib import Path

from shared.errors import HookInstallError
from shared.git_inspector import GitInspector
from shared.models import HookInstallResult, HookInstallStatus

logger = logging.getLogger(__name__)

HOOK_MODE = 0o755

HOOK_TEMPLATE = """#!/bin/sh

# post-commit hook for devlog
# Logs the message of each new commit. Never blocks or fails the commit.

if ! command -v devlog >/dev/null 2>&1; then
    exit 0
fi

DEVLOG_CONFIG="${DEVLOG_STORAGE__CONFIG_PATH:-$HOME/.config/devlog.json}"
if [ ! -f "$DEVLOG_CONFIG" ]; then
    exit 0
fi

devlog

exit 0
"""


class HookInstaller:
    """Writes the devlog post-commit hook into a git repository."""

    def __init__(
        self,
        inspector: GitInspector,
        hook_name: str = "post-commit",
        marker: str = "devlog",
        backup_suffix: str = ".backup",
    ):
        self.inspector = inspector
        self.hook_name = hook_name
        self.marker = marker
        self.backup_suffix = backup_suffix

    def _hooks_dir(self) -> Path:
        if not self.inspector.is_git_repository():
            raise HookInstallError(
                "Current directory is not a git repository.",
                hint="Please run this command from within a git repository.",
            )

        hooks_dir = self.inspector.hooks_dir()
        if not hooks_dir.is_dir():
            raise HookInstallError(
                f"{hooks_dir} directory not found.",
                hint="This might not be a valid git repository.",
            )
        return hooks_dir

    def install(self) -> HookInstallResult:
        """Install the hook unless one is already present."""
        hook_path = self._hooks_dir() / self.hook_name

        if hook_path.exists():
            try:
                existing = hook_path.read_text(encoding="utf-8", errors="replace")
            except OSError as e:
                raise HookInstallError(f"Error reading existing hook: {e}")

            status = (
                HookInstallStatus.ALREADY_INTEGRATED
                if self.marker in existing
                else HookInstallStatus.EXISTING_HOOK
            )
            logger.info(f"Leaving existing hook at {hook_path} untouched ({status.value})")
            return HookInstallResult(status=status, hook_path=hook_path)

        try:
            hook_path.write_text(HOOK_TEMPLATE, encoding="utf-8")
            hook_path.chmod(HOOK_MODE)
        except OSError as e:
            raise HookInstallError(f"Error installing hook: {e}")

        logger.info(f"Installed post-commit hook at {hook_path}")
        return HookInstallResult(status=HookInstallStatus.INSTALLED, hook_path=hook_path)

    def install_force(self) -> HookInstallResult:
        """Back up and remove any existing hook, then install."""
        hook_path = self._hooks_dir() / self.hook_name
        backup_path = None

        if hook_path.exists():
            backup_path = hook_path.with_name(hook_path.name + self.backup_suffix)
            try:
                shutil.copy2(hook_path, backup_path)
                hook_path.unlink()
            except OSError as e:
                raise HookInstallError(f"Error backing up existing hook: {e}")
            logger.info(f"Backed up existing hook to {backup_path}")

        result = self.install()
        result.backup_path = backup_path
        return result
