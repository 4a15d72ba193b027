"""Environment-driven configuration.

Values come from the process environment, optionally seeded from a ``.env``
file found from the working directory upwards. Explicit environment
variables always win over the file.
"""

import os
from pathlib import Path
from typing import Optional

from dotenv import find_dotenv, load_dotenv

from nexus.logger import get_logger

logger = get_logger(__name__)

DATABASE_URL_ENV = "NEXUS_DATABASE_URL"
DATA_DIR_ENV = "NEXUS_DATA_DIR"

DEFAULT_MODELS = {
    "fast": "gpt-4.1-mini",
    "standard": "gpt-4.1",
    "thinking": "o3",
}
DEFAULT_LOG_CAPACITY = 500


def load_environment() -> None:
    """Load ``.env`` without overriding variables already set."""
    dotenv_path = find_dotenv(usecwd=True)
    if dotenv_path:
        load_dotenv(dotenv_path=dotenv_path, override=False)


def get_env_int(name: str, default: int, min_value: Optional[int] = None) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Invalid %s='%s', using default %s.", name, raw, default)
        return default
    if min_value is not None and value < min_value:
        logger.warning("%s='%s' below minimum %s, using default %s.", name, raw, min_value, default)
        return default
    return value


def get_database_url() -> Optional[str]:
    """Relational store URL, or None to use the local store."""
    return os.getenv(DATABASE_URL_ENV) or None


def get_data_dir() -> Path:
    """Directory of the local store, defaulting to ~/.nexus."""
    raw = os.getenv(DATA_DIR_ENV)
    if raw:
        return Path(raw)
    return Path.home() / ".nexus"


def get_model(mode: str) -> str:
    """Model name for an AI mode (fast, standard, thinking)."""
    return os.getenv(f"NEXUS_MODEL_{mode.upper()}") or DEFAULT_MODELS[mode]


def get_log_capacity() -> int:
    """Maximum entries kept in the import activity log."""
    return get_env_int("NEXUS_LOG_CAPACITY", DEFAULT_LOG_CAPACITY, min_value=1)
