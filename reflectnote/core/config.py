import logging
import os

from dotenv import load_dotenv


load_dotenv()

logger = logging.getLogger(__name__)


def _get_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _get_list(value: str | None, default: list[str]) -> list[str]:
    if value is None:
        return default
    return [item.strip() for item in value.split(",") if item.strip()]

APP_ENV = os.getenv("APP_ENV", "development")

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./reflectnote.db")

CORS_ALLOWED_ORIGINS = _get_list(os.getenv("CORS_ALLOWED_ORIGINS"), ["http://localhost:5173"])

# Placeholder hash given to new and reset accounts; forces the first-login flow.
DEFAULT_PASSWORD_HASH = os.getenv("DEFAULT_PASSWORD_HASH", "0000")

SEED_SAMPLE_DATA = _get_bool(os.getenv("SEED_SAMPLE_DATA"), default=True)

USERS_KEY = "reflection_note_users_v2"
REFLECTIONS_KEY = "reflection_note_reflections_v2"
CLASSES_KEY = "reflection_note_classes_v2"
ANALYSES_KEY = "reflection_note_analyses_v2"
CURRENT_USER_KEY = "reflection_note_session_v2"
LAST_ACTIVITY_KEY = "reflection_note_last_activity"


def validate_runtime_config() -> None:
    if not DATABASE_URL:
        raise RuntimeError("DATABASE_URL must not be empty.")
    if APP_ENV.lower() == "production" and DEFAULT_PASSWORD_HASH == "0000":
        logger.warning("DEFAULT_PASSWORD_HASH is the stock sentinel in production.")
