# config.py
"""
Runtime settings, read from the environment.

Every value can be overridden per Flask app through ``create_app(config=...)``.
"""

import os

VERSION = "1.0"

DB_FILE = os.getenv("PHISHSCORE_DB", "phishscore.db")
DATABASE_URL = os.getenv("PHISHSCORE_DATABASE_URL", f"sqlite:///{DB_FILE}")
HISTORY_CAPACITY = int(os.getenv("PHISHSCORE_HISTORY_CAPACITY", "50"))

API_KEY = os.getenv("PHISHSCORE_API_KEY", None)
REDIS_URL = os.getenv("REDIS_URL")
RATE_LIMIT = os.getenv("PHISHSCORE_RATE_LIMIT", "60 per minute")

MAX_BATCH = int(os.getenv("PHISHSCORE_MAX_BATCH", "500"))
BATCH_WORKERS = int(os.getenv("PHISHSCORE_BATCH_WORKERS", "4"))

LOG_LEVEL = os.getenv("PHISHSCORE_LOG_LEVEL", "INFO").upper()
PORT = int(os.getenv("PORT", "5050"))


def app_defaults() -> dict:
    """Flask config keys for the API."""
    return {
        "DATABASE_URL": DATABASE_URL,
        "HISTORY_CAPACITY": HISTORY_CAPACITY,
        "API_KEY": API_KEY,
        "REDIS_URL": REDIS_URL,
        "RATE_LIMIT": RATE_LIMIT,
        "MAX_BATCH": MAX_BATCH,
        "BATCH_WORKERS": BATCH_WORKERS,
    }
