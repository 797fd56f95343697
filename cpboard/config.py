import math
import os
from dotenv import load_dotenv

load_dotenv()


def env_float(name: str, default: float) -> float:
    """Read a positive float from the environment, falling back to default on bad input."""
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    if not math.isfinite(value) or value <= 0:
        return default
    return value


def env_int(name: str, default: int) -> int:
    """Read a positive integer from the environment, falling back to default on bad input."""
    value = env_float(name, default)
    if value != int(value):
        return default
    return int(value)


class Config:
    """Leaderboard configuration settings"""

    # Database settings
    DATABASE_URL = os.getenv('DATABASE_URL', 'sqlite:///cpboard.db')

    # Runtime settings
    DEBUG = os.getenv('DEBUG', 'False').lower() == 'true'
    LOG_DIR = os.getenv('LOG_DIR', 'logs')

    # Scoring settings
    LC_WEIGHT = env_float('LC_WEIGHT', 1.0)
    CF_WEIGHT = env_float('CF_WEIGHT', 1.0)
    CF_BASELINE = env_float('CF_BASELINE', 800)

    # Aggregation settings
    LEADERBOARD_CONCURRENCY = env_int('LEADERBOARD_CONCURRENCY', 8)
    STAT_REQUEST_TIMEOUT = env_float('STAT_REQUEST_TIMEOUT', 12.0)

    @classmethod
    def validate(cls):
        """Validate that required configuration is present"""
        if not cls.DATABASE_URL:
            raise ValueError("DATABASE_URL is required")
