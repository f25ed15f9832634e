"""
Configuration module for Telegram group log bot.
Contains all environment variables and constants.
"""

import os
from dotenv import load_dotenv

# Load environment variables from .env
load_dotenv()

# ============ Environment Variables ============


def _require_env(var_name: str) -> str:
    raw = os.environ.get(var_name)
    if raw is None or str(raw).strip() == "":
        raise RuntimeError(f"Missing required environment variable: {var_name}")
    return raw.strip()


def _require_int_env(var_name: str) -> int:
    raw = os.environ.get(var_name)
    if raw is None or str(raw).strip() == "":
        raise RuntimeError(f"Missing required environment variable: {var_name}")
    try:
        return int(raw)
    except ValueError as exc:
        raise RuntimeError(f"Environment variable {var_name} must be an integer, got: {raw}") from exc


def _async_database_url(url: str) -> str:
    # SQLAlchemy asyncio needs an async driver in the URL
    if url.startswith("postgres://"):
        url = "postgresql://" + url[len("postgres://"):]
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+asyncpg://", 1)
    if url.startswith("sqlite://"):
        return url.replace("sqlite://", "sqlite+aiosqlite://", 1)
    if url.startswith(("postgresql+asyncpg://", "sqlite+aiosqlite://")):
        return url
    raise RuntimeError(f"Unsupported DATABASE_URL, expected PostgreSQL or SQLite: {url}")


# Telegram
TG_BOT_TOKEN = _require_env("TG_BOT_TOKEN")
ADMIN_ID = _require_int_env("ADMIN_ID")

# Database (PostgreSQL in production, SQLite locally)
DATABASE_URL = _async_database_url(os.environ.get("DATABASE_URL", "sqlite+aiosqlite:///logbot.db"))

# Display
DISPLAY_TIMEZONE = os.environ.get("DISPLAY_TIMEZONE", "Asia/Shanghai")
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

# ============ Constants ============

# Log browser
PAGE_SIZE = 10  # Entries per page
EXPORT_MAX_ROWS = 1000  # Newest rows included in a TXT export

# Message limits
MAX_MESSAGE_LENGTH = 4000  # Telegram limit is 4096, use safe margin
MAX_ENTRY_LENGTH = 120  # Entry preview on a page; full text is in the export

# Membership checks
MEMBERSHIP_CHECK_TIMEOUT_SECONDS = 10
MEMBERSHIP_CHECK_CONCURRENCY = 5  # Parallel getChatMember calls per filter

# Grant durations offered by /grant: key -> hours (None = permanent)
GRANT_DURATIONS = {
    "1d": 24,
    "7d": 24 * 7,
    "30d": 24 * 30,
    "perm": None,
}
