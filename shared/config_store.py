"""
Persistence and interactive setup of the devlog user configuration.

The store is the only reader and writer of the configuration file. A missing
or unreadable file is never fatal on load; it yields an empty configuration.
"""

import json
import logging
from pathlib import Path
from typing import Callable

from pydantic import ValidationError

from shared.errors import ConfigurationError
from shared.models import DevLogConfig

logger = logging.getLogger(__name__)

Prompt = Callable[[str], str]


class ConfigStore:
    """Reads and writes the JSON configuration file."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.is_file()

    def load(self) -> DevLogConfig:
        """Load the configuration, or an empty one if missing or unparseable."""
        if not self.exists():
            logger.debug(f"No configuration file at {self.path}")
            return DevLogConfig()

        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
            if not isinstance(data, dict):
                raise ValueError("configuration must be a JSON object")
        except (OSError, ValueError) as e:
            logger.error(f"Error reading config: {e}")
            return DevLogConfig()

        try:
            return DevLogConfig.model_validate(data)
        except ValidationError as e:
            # Keep the readable fields; invalid ones fall back to their defaults
            invalid = {error["loc"][0] for error in e.errors() if error["loc"]}
            logger.error(f"Error reading config, ignoring {sorted(invalid)}: {e}")
            return DevLogConfig.model_validate(
                {key: value for key, value in data.items() if key not in invalid}
            )

    def save(self, config: DevLogConfig) -> None:
        """Write the configuration as pretty-printed JSON."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(config.to_json_dict(), indent=2), encoding="utf-8")
        except OSError as e:
            logger.error(f"Error saving config: {e}")
            raise ConfigurationError(
                f"Error saving config: {e}",
                hint=f"Check that {self.path.parent} is writable",
            )
        logger.info(f"Saved configuration to {self.path}")


def _answered_no(answer: str) -> bool:
    return answer.strip() == "n"


def configure(store: ConfigStore, prompt: Prompt, default_base_url: str) -> DevLogConfig:
    """
    Interactively update and save the configuration.

    Args:
        store: Where the configuration lives
        prompt: Synchronous question -> answer callable
        default_base_url: Base URL offered when none is configured

    Returns:
        DevLogConfig: The saved configuration

    Raises:
        ConfigurationError: No API key was given and none exists yet
    """
    config = store.load()

    masked = config.masked_api_key()
    question = f"Enter your API key (current: {masked}): " if masked else "Enter your API key: "
    api_key = prompt(question).strip()
    if api_key:
        config.api_key = api_key
    elif not config.api_key:
        raise ConfigurationError("API key is required.", hint="Run 'devlog config' again")

    current_base_url = config.api_base_url or default_base_url
    base_url = prompt(f"Enter API base URL (default: {current_base_url}): ").strip()
    config.api_base_url = base_url or current_base_url

    include_hash = prompt("Include commit hash in logs? (y/n, default: y): ")
    config.include_commit_hash = not _answered_no(include_hash)

    include_date = prompt("Include date in log entries? (y/n, default: y): ")
    config.include_date = not _answered_no(include_date)

    store.save(config)
    return config
