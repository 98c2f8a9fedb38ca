import os

def int_env(key: str, default: int) -> int:
    """Positive int from the environment; unset, garbage or <= 0 -> default."""
    try:
        val = int(os.getenv(key) or default)
    except ValueError:
        return default
    return val if val > 0 else default

APP_TITLE = "Mood Log"
DB_PATH = os.getenv("MOODLOG_DB_PATH") or "data/moodlog.db"
LOG_LEVEL = os.getenv("MOODLOG_LOG_LEVEL") or "INFO"

# mood scale
MIN_SCORE = 1
MAX_SCORE = 5
NEUTRAL_SCORE = 3

TREND_WINDOW_DAYS = int_env("MOODLOG_TREND_DAYS", 7)
STREAK_MAX_DAYS = 365  # hard cap on the backward streak scan
