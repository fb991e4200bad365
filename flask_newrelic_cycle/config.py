"""Environment-driven settings for the New Relic request-cycle integration.

Environment variables:
  NEW_RELIC_ENABLED           - "1" to initialize the agent, anything else skips it.
  NEW_RELIC_CONFIG_FILE       - (optional) path to a newrelic.ini file. When unset the
                                agent reads its settings from NEW_RELIC_* variables.
  NEW_RELIC_REGISTER_TIMEOUT  - (optional) seconds to wait for application
                                registration. Defaults to 10.
  NEWRELIC_PACKAGE_PREFIX     - (optional) dotted prefix stripped from page class
                                names before they become transaction names.
  LOG_LEVEL                   - (optional) root log level. Defaults to INFO.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from dotenv import find_dotenv, load_dotenv


def get_nr_enabled() -> bool:
    """
    Whether the New Relic agent should be initialized.

    Returns:
        bool: True only when NEW_RELIC_ENABLED is "1".
    """
    return os.getenv("NEW_RELIC_ENABLED", "0") == "1"


def get_nr_config_file() -> Optional[str]:
    """Return the newrelic.ini path, or None to use environment settings."""
    return os.getenv("NEW_RELIC_CONFIG_FILE") or None


def get_nr_register_timeout() -> int:
    """
    Get the application registration timeout.

    Returns:
        int: Timeout in seconds, defaults to 10.

    Raises:
        ValueError: If the variable is set to something other than an integer.
    """
    return int(os.getenv("NEW_RELIC_REGISTER_TIMEOUT", "10"))


def get_package_prefix() -> str:
    return os.getenv("NEWRELIC_PACKAGE_PREFIX", "")


def get_log_level() -> str:
    return os.getenv("LOG_LEVEL", "INFO")


@dataclass(frozen=True)
class Settings:
    """Snapshot of the integration settings."""

    nr_enabled: bool
    nr_config_file: Optional[str]
    nr_register_timeout: int
    package_prefix: str
    log_level: str


def load_settings(env_file: Optional[Union[str, Path]] = None) -> Settings:
    """
    Load settings from the environment, reading a .env file first.

    Variables already present in the environment win over the .env file.

    Args:
        env_file: Path to a .env file. When omitted, python-dotenv searches
            upwards from the working directory, not from this package.

    Returns:
        Settings: The resolved settings.
    """
    if env_file is not None:
        load_dotenv(dotenv_path=env_file)
    else:
        load_dotenv(find_dotenv(usecwd=True))

    return Settings(
        nr_enabled=get_nr_enabled(),
        nr_config_file=get_nr_config_file(),
        nr_register_timeout=get_nr_register_timeout(),
        package_prefix=get_package_prefix(),
        log_level=get_log_level(),
    )
