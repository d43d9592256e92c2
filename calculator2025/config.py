"""
Configuration constants for Calculator 2025.
"""
import logging
import os
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

APP_NAME = "calculator2025"


def default_history_path() -> Path:
    """Per-user data location for the history file."""
    if os.name == "nt" and os.getenv("APPDATA"):
        base = Path(os.environ["APPDATA"])
    elif os.getenv("XDG_DATA_HOME"):
        base = Path(os.environ["XDG_DATA_HOME"])
    else:
        base = Path.home() / ".local" / "share"
    return base / APP_NAME / "history.txt"


# History persistence
HISTORY_FILE = Path(os.getenv("CALC_HISTORY_FILE", str(default_history_path())))
DEFAULT_HISTORY_LIMIT = 10


def positive_int(name: str, default: int) -> int:
    """Read a positive integer from the environment, falling back to `default`."""
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        value = 0
    if value < 1:
        logger.warning("Ignoring %s=%r; using %d", name, raw, default)
        return default
    return value


HISTORY_LIMIT = positive_int("CALC_HISTORY_LIMIT", DEFAULT_HISTORY_LIMIT)

# Logging
LOG_LEVEL = os.getenv("CALC_LOG_LEVEL", "INFO").upper()
if not isinstance(logging.getLevelName(LOG_LEVEL), int):
    logger.warning("Ignoring CALC_LOG_LEVEL=%r; using INFO", LOG_LEVEL)
    LOG_LEVEL = "INFO"
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Display formatting
MAX_DISPLAY_WIDTH = 16      # characters before falling back to scientific form
DECIMAL_PLACES = 10
SCIENTIFIC_PRECISION = 9
MAX_INPUT_DIGITS = 16

ERROR_TEXT = "Error"
