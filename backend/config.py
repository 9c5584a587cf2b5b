"""
config.py
---------
Central configuration for the boat-tour booking backend.
All secrets loaded from environment variables — never hard-coded.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the backend directory (if it exists) so env vars in that file
# are picked up by os.getenv() below.
_env_path = Path(__file__).parent / ".env"
if _env_path.exists():
    load_dotenv(_env_path, override=True)


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


# ── Home port (origin of every custom route) ──────────────────────────────────
# Split, Croatia — prepended to every custom tour, centre of the geofence.
ORIGIN_LAT: float = float(os.getenv("ORIGIN_LAT", "43.5081"))
ORIGIN_LON: float = float(os.getenv("ORIGIN_LON", "16.4402"))
ORIGIN_NAME: str  = os.getenv("ORIGIN_NAME", "Split, Croatia")

# ── Tour settings defaults ────────────────────────────────────────────────────
# Seed values for the single `tour_settings` row (id = 1).
SETTINGS_ROW_ID: int = 1
DEFAULT_TOUR_SETTINGS: dict = {
    "max_points":           5,
    "max_people":           12,
    "start_fee":            50.0,
    "per_distance_rate":    3.0,
    "distance_unit":        "km",
    "currency_code":        "EUR",
    "max_distance_radius":  30.0,
    "distance_radius_unit": "km",
}
# Currencies the admin settings form offers
SUPPORTED_CURRENCIES: list[str] = ["EUR", "USD", "GBP", "HRK"]

# Minimum number of selected waypoints before a custom tour can be booked
MIN_BOOKABLE_POINTS: int = 2

# ── PostgreSQL (hosted database) ──────────────────────────────────────────────
# Schema defined in db/schema.sql
# Apply with: python scripts/run_migrations.py
POSTGRES_HOST: str     = os.getenv("POSTGRES_HOST",     "localhost")
POSTGRES_PORT: int     = int(os.getenv("POSTGRES_PORT", "5432"))
POSTGRES_DB: str       = os.getenv("POSTGRES_DB",       "postgres")
POSTGRES_USER: str     = os.getenv("POSTGRES_USER",     "postgres")
POSTGRES_PASSWORD: str = os.getenv("POSTGRES_PASSWORD", "postgres")
POSTGRES_SSLMODE: str  = os.getenv("POSTGRES_SSLMODE",  "prefer")
POSTGRES_MIN_CONN: int = int(os.getenv("POSTGRES_MIN_CONN", "1"))
POSTGRES_MAX_CONN: int = int(os.getenv("POSTGRES_MAX_CONN", "10"))

# ── Hosted auth API ───────────────────────────────────────────────────────────
# Project URL and public anon key of the hosted backend.
SUPABASE_URL: str       = os.getenv("SUPABASE_URL",      "https://your-project.supabase.co")
SUPABASE_ANON_KEY: str  = os.getenv("SUPABASE_ANON_KEY", "")
# Timeout in seconds for all auth HTTP calls
AUTH_REQUEST_TIMEOUT: int = int(os.getenv("AUTH_REQUEST_TIMEOUT", "10"))

# ── Build sessions ────────────────────────────────────────────────────────────
# Where in-progress custom tours live: "in_memory" | "redis"
SESSION_BACKEND: str   = os.getenv("SESSION_BACKEND", "in_memory")
# TTL (seconds), reset on every write: 2 hours without an edit. Both stores apply it.
BUILD_SESSION_TTL: int = int(os.getenv("BUILD_SESSION_TTL", "7200"))
# Per-session lock around each edit: expiry and how long a request waits (s)
BUILD_SESSION_LOCK_TIMEOUT: int = int(os.getenv("BUILD_SESSION_LOCK_TIMEOUT", "10"))
BUILD_SESSION_LOCK_WAIT: int    = int(os.getenv("BUILD_SESSION_LOCK_WAIT", "5"))

# ── Redis ─────────────────────────────────────────────────────────────────────
REDIS_HOST: str     = os.getenv("REDIS_HOST",     "localhost")
REDIS_PORT: int     = int(os.getenv("REDIS_PORT", "6379"))
REDIS_DB: int       = int(os.getenv("REDIS_DB",   "0"))
REDIS_PASSWORD: str = os.getenv("REDIS_PASSWORD", "")

# ── HTTP / logging ────────────────────────────────────────────────────────────
CORS_ALLOW_ORIGINS: list[str] = [
    o.strip() for o in os.getenv("CORS_ALLOW_ORIGINS", "*").split(",") if o.strip()
]
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
# Per-session JSONL event trail under logs/
SESSION_LOG_ENABLED: bool = _flag("SESSION_LOG_ENABLED", "true")
