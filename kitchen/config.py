"""Configuration for kitchen."""

import logging
import os
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

APP_NAME = "kitchen"
DEFAULT_HOME = Path.home() / f".{APP_NAME}"
DEFAULT_LOG_LEVEL = "WARNING"
DEFAULT_HTTP_TIMEOUT = 30.0

# Layout of a kitchen home directory
RECIPES_DIR = "recipes"
CATEGORIES_FILE = "categories.txt"
STAPLES_FILE = "staples.txt"
MENU_FILE = "menu.txt"


class ConfigError(ValueError):
    """A KITCHEN_* setting has an invalid value."""


def get_home() -> Path:
    """Root directory of the recipe store (KITCHEN_HOME, default ~/.kitchen)."""
    home = os.getenv("KITCHEN_HOME")
    if home:
        return Path(home).expanduser()
    return DEFAULT_HOME


def get_log_level() -> str:
    """Log level name from KITCHEN_LOG_LEVEL."""
    level = os.getenv("KITCHEN_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()
    if not isinstance(logging.getLevelName(level), int):
        raise ConfigError(f"KITCHEN_LOG_LEVEL must be a log level name, got '{level}'")
    return level


def get_http_timeout() -> float:
    """Timeout in seconds for fetching recipes over HTTP."""
    value = os.getenv("KITCHEN_HTTP_TIMEOUT")
    if not value:
        return DEFAULT_HTTP_TIMEOUT
    try:
        return float(value)
    except ValueError:
        raise ConfigError(f"KITCHEN_HTTP_TIMEOUT must be a number, got '{value}'") from None
