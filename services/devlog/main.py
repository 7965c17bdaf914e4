"""
DevLog service: turns the configuration and git state into one posted entry.

The user configuration is passed into every call; the service holds only
its collaborators and the tool settings.
"""

import logging
from typing import Callable, Optional

from pydantic import ValidationError

from config.settings import Settings
from shared.api_client import DevLogAPIClient
from shared.errors import ConfigurationError, EntryError
from shared.formatter import format_entry, resolve_entry_date, today_local
from shared.git_inspector import GitInspector
from shared.models import AppendResponse, DevLogConfig, LogEntry

logger = logging.getLogger(__name__)

ClientFactory = Callable[[DevLogConfig], DevLogAPIClient]


class DevLogService:
    """Core logging flow shared by the CLI commands and the git hook."""

    def __init__(
        self,
        settings: Settings,
        git_inspector: Optional[GitInspector] = None,
        client_factory: Optional[ClientFactory] = None,
        today: Callable[[], str] = today_local,
    ):
        self.settings = settings
        self.git_inspector = git_inspector or GitInspector()
        self.client_factory = client_factory or self._default_client
        self.today = today

    def _default_client(self, config: DevLogConfig) -> DevLogAPIClient:
        return DevLogAPIClient(
            base_url=self.base_url_for(config),
            api_key=config.api_key,
            timeout=self.settings.api.request_timeout,
            retry_attempts=self.settings.api.retry_attempts,
            retry_backoff=self.settings.api.retry_backoff,
            append_path=self.settings.api.append_path,
        )

    def base_url_for(self, config: DevLogConfig) -> str:
        return config.api_base_url or self.settings.api.default_base_url

    def build_entry(
        self,
        config: DevLogConfig,
        message: Optional[str] = None,
        entry_date: Optional[str] = None,
    ) -> LogEntry:
        """
        Build the entry for an explicit message or the last commit.

        Raises:
            ConfigurationError: No API key is configured
            GitError: No message was given and the last commit cannot be read
            EntryError: The text is empty or the date is malformed
        """
        if not config.api_key:
            raise ConfigurationError(
                "No API key found.",
                hint='Please run "devlog config" first.',
            )

        if message is None:
            commit_message = self.git_inspector.get_last_commit_message()
            commit_hash = (
                self.git_inspector.get_last_commit_hash() if config.include_commit_hash else None
            )
            text = format_entry(commit_message, config, commit_hash)
        else:
            text = message

        date = resolve_entry_date(config, entry_date, today=self.today())

        try:
            return LogEntry(text=text, date=date)
        except ValidationError as e:
            reason = "; ".join(err["msg"] for err in e.errors())
            raise EntryError(f"Invalid log entry: {reason}", hint='Usage: devlog log "message" [YYYY-MM-DD]')

    async def send_entry(self, config: DevLogConfig, entry: LogEntry) -> AppendResponse:
        """Post the entry to the configured service."""
        logger.info(f"Posting entry to {self.base_url_for(config)}")
        async with self.client_factory(config) as client:
            return await client.append_entry(entry)
