"""Configuration for grocery-parser."""

import logging
import os

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

APP_NAME = "grocery-parser"

LOG_LEVEL_ENV = "GROCERY_PARSER_LOG_LEVEL"
USER_ID_ENV = "GROCERY_PARSER_USER_ID"

DEFAULT_LOG_LEVEL = "WARNING"
DEFAULT_USER_ID = "local"

# Structured import defaults for fields a meal plan leaves out
DEFAULT_SERVINGS = 4
DEFAULT_UNIT = "each"


def get_log_level() -> str:
    """Get the log level name from the environment, falling back to WARNING."""
    level = os.getenv(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL).strip().upper()
    if not isinstance(logging.getLevelName(level), int):
        return DEFAULT_LOG_LEVEL
    return level


def get_default_user_id() -> str:
    """Get the user id imported meal plans are assigned to."""
    return os.getenv(USER_ID_ENV, "").strip() or DEFAULT_USER_ID
