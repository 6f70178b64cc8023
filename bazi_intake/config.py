"""
Runtime configuration.

Only the log level comes from the environment; the CLI loads a local .env
file before reading it. The numeric ranges are part of the validation
rules and stay fixed.
"""

import logging
import os


# ============================================================
# LOGGING
# ============================================================

DEFAULT_LOG_LEVEL = "WARNING"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def log_level() -> str:
    """LOG_LEVEL from the environment, or WARNING if unset or not a level name."""
    level = os.getenv("LOG_LEVEL", DEFAULT_LOG_LEVEL).strip().upper()
    if not isinstance(logging.getLevelName(level), int):
        return DEFAULT_LOG_LEVEL
    return level


# ============================================================
# FIELD RANGES (inclusive)
# ============================================================

BIRTH_YEAR_MIN = 1900
BIRTH_YEAR_MAX = 2100

START_AGE_MIN = 1
START_AGE_MAX = 11

# How many luck cycles the advisory preview lists by default
LUCK_CYCLE_PREVIEW_COUNT = 8
