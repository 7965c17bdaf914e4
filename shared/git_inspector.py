"""
Git metadata extraction for devlog.

Commands run through GitPython's ``git.Git`` wrapper in a fixed working
directory, so the results match what the ``git`` executable reports there.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from git import Git
from git.exc import CommandError

from shared.errors import GitError

logger = logging.getLogger(__name__)

SHORT_HASH_LENGTH = 8


class GitInspector:
    """Reads the last commit of the repository containing ``working_dir``."""

    def __init__(self, working_dir: Optional[Union[str, Path]] = None):
        self.working_dir = Path(working_dir) if working_dir else Path.cwd()
        self.git = Git(str(self.working_dir))

    def get_last_commit_message(self) -> str:
        """Return the trimmed message of the last commit."""
        try:
            return self.git.log("-1", "--pretty=%B").strip()
        except (CommandError, OSError) as e:
            logger.debug(f"git log failed in {self.working_dir}: {e}")
            raise GitError(
                f"Error getting last commit message: {e}",
                hint="Make sure you are in a git repository and have at least one commit.",
            )

    def get_last_commit_hash(self) -> Optional[str]:
        """Return the short hash of the last commit, or None if unavailable."""
        try:
            full_hash = self.git.log("-1", "--pretty=%H").strip()
        except (CommandError, OSError) as e:
            logger.debug(f"Commit hash unavailable: {e}")
            return None
        return full_hash[:SHORT_HASH_LENGTH] or None

    def is_git_repository(self) -> bool:
        try:
            return self.git.rev_parse("--is-inside-work-tree").strip() == "true"
        except (CommandError, OSError):
            return False

    def hooks_dir(self) -> Path:
        """Return the hooks directory of the repository."""
        try:
            hooks_path = self.git.rev_parse("--git-path", "hooks").strip()
        except (CommandError, OSError) as e:
            raise GitError(f"Cannot locate git hooks directory: {e}")
        return self.working_dir / hooks_path
