"""Load settings from environment. Every value has a default; a .env file next to this module is optional."""
import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv(Path(__file__).resolve().parent / ".env")


def _str(key: str, default: str = "") -> str:
    return os.environ.get(key, default).strip()


def _int(key: str, default: int = 0) -> int:
    try:
        return int(os.environ.get(key, str(default)))
    except ValueError:
        return default


class Settings:
    # Codeforces API
    CF_API_BASE: str = _str("CF_API_BASE", "https://codeforces.com/api").rstrip("/")
    CF_PROBLEM_URL: str = _str("CF_PROBLEM_URL", "https://codeforces.com/problemset/problem")
    # Seconds; 0 waits forever
    REQUEST_TIMEOUT: int = _int("REQUEST_TIMEOUT", 15)

    # Day boundaries for the activity heatmap
    TIMEZONE: str = _str("TIMEZONE", "UTC")
    ACTIVITY_WINDOW_DAYS: int = _int("ACTIVITY_WINDOW_DAYS", 180)

    # Analysis and recommendations
    WEAK_TAG_COUNT: int = _int("WEAK_TAG_COUNT", 3)
    DEFAULT_TARGET_RATING: int = _int("DEFAULT_TARGET_RATING", 1200)
    RECOMMENDATION_LIMIT: int = _int("RECOMMENDATION_LIMIT", 10)

    # Logging
    LOG_LEVEL: str = _str("LOG_LEVEL", "INFO")


settings = Settings()
