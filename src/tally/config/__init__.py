"""Configuration: settings resolution and logging setup."""

from tally.config.settings import (
    Settings,
    get_settings,
    set_settings,
    reset_settings,
    get_default_data_dir,
)
from tally.config.logging_config import setup_logging

__all__ = [
    "Settings",
    "get_settings",
    "set_settings",
    "reset_settings",
    "get_default_data_dir",
    "setup_logging",
]
