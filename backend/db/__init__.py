"""
db/
----
Database access layer for the boat-tour booking backend.

Storage architecture:
  PostgreSQL (psycopg2) — hosted persistent store
    tables: tour_settings (single row id = 1), predefined_tours
    schema: db/schema.sql
    apply:  python scripts/run_migrations.py

  Redis (redis-py) — optional build-session store (SESSION_BACKEND=redis)
    buildsession:{session_id}   TTL = BUILD_SESSION_TTL

Public exports (import from here for convenience):
    from db import get_conn, get_redis
    from db.repositories import settings_repo, tour_repo
"""

from db.connection import get_conn, close_pool
from db.redis_client import get_redis

__all__ = ["get_conn", "close_pool", "get_redis"]
