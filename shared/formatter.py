"""Log entry text and date formatting."""

from datetime import date
from typing import Optional

from shared.models import DevLogConfig, DATE_FORMAT


def format_entry(message: str, config: DevLogConfig, commit_hash: Optional[str] = None) -> str:
    """Prefix the message with ``[hash] `` when enabled and a hash is known."""
    if config.include_commit_hash and commit_hash:
        return f"[{commit_hash}] {message}"
    return message


def today_local() -> str:
    return date.today().strftime(DATE_FORMAT)


def resolve_entry_date(
    config: DevLogConfig,
    explicit_date: Optional[str] = None,
    today: Optional[str] = None,
) -> Optional[str]:
    """
    Pick the date sent with an entry.

    An explicit date always wins. Otherwise the current local date is used
    when ``include_date`` is enabled, and no date at all when it is not.
    """
    if explicit_date:
        return explicit_date
    if config.include_date:
        return today or today_local()
    return None
