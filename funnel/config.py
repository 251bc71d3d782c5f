"""Application configuration and constants."""
import logging
import os
from pathlib import Path


def _parse_int_env(name: str, default: int) -> int:
    """Parse integer from environment variable."""
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _parse_log_level(name: str, default: int) -> int:
    """Parse logging level name (or number) from environment variable."""
    raw = os.environ.get(name)
    if not raw:
        return default
    if raw.isdigit():
        return int(raw)
    level = logging.getLevelName(raw.strip().upper())
    return level if isinstance(level, int) else default


# Database
DB_DIR = Path(os.environ.get("DB_DIR", Path.cwd() / "data"))
DB_DIR.mkdir(parents=True, exist_ok=True)
DATABASE_URL = os.environ.get(
    "DATABASE_URL", f"sqlite:///{DB_DIR / 'funnel.db'}"
)

# Client-side quiz sessions (terminal player)
SESSION_DIR = Path(os.environ.get("SESSION_DIR", DB_DIR / "sessions"))

# Authentication
SECRET_KEY = os.environ.get(
    "SECRET_KEY",
    "CHANGE_ME_IN_PRODUCTION_USE_openssl_rand_hex_32"
)
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = _parse_int_env("ACCESS_TOKEN_EXPIRE_MINUTES", 60)

# Tracking defaults used when no global config row exists
DEFAULT_PIXEL_ID = os.environ.get("DEFAULT_PIXEL_ID", "1213472546398709")
DEFAULT_CTA_URL = os.environ.get("DEFAULT_CTA_URL", "")

# Quiz runtime
LOADING_ITEM_DEFAULT_MS = 2000
LOADING_TAIL_MS = 500
PLAYER_TIMEOUT_SECONDS = _parse_int_env("PLAYER_TIMEOUT_SECONDS", 10)

# Logging
LOG_LEVEL = _parse_log_level("LOG_LEVEL", logging.INFO)
