"""
Runtime configuration.

Values come from environment variables (optionally via a .env file).
"""

from __future__ import annotations

import os

from dotenv import load_dotenv

# Load environment
load_dotenv()


DEFAULT_DATABASE_URL = "sqlite:///data/vocabox.db"
DEFAULT_MONGO_DB_NAME = "vocabox"


def is_test_mode() -> bool:
    """Check if running in test mode."""
    return os.getenv("TEST_MODE", "false").lower() == "true"


def get_database_url() -> str:
    """
    Get the local database URL from environment variables.

    Falls back to a SQLite file under ./data. In test mode the database
    name 'vocabox' is swapped for 'test_vocabox'.

    Returns:
        SQLAlchemy connection string
    """
    url = os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL)
    if is_test_mode():
        return url.replace("vocabox.db", "test_vocabox.db")
    return url


def get_mongo_uri() -> str:
    """
    Get the MongoDB URI for the remote store.

    Raises:
        ValueError: if MONGO_URI is not set
    """
    mongo_uri = os.getenv("MONGO_URI")
    if not mongo_uri:
        raise ValueError("MONGO_URI not found in environment variables")
    return mongo_uri


def get_mongo_db_name() -> str:
    return os.getenv("MONGO_DB_NAME", DEFAULT_MONGO_DB_NAME)


def get_default_user_id() -> str:
    """Get default user id for scoping remote data."""
    return os.getenv("DEFAULT_USER_ID", "local")


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}")
    return value


def get_sync_batch_size() -> int:
    return _int_env("SYNC_BATCH_SIZE", 100)


def get_learning_batch_size() -> int:
    return _int_env("LEARNING_BATCH_SIZE", 5)


def get_matching_choices() -> int:
    return _int_env("MATCHING_CHOICES", 4)
