"""
db/redis_client.py
-------------------
redis-py client — singleton plus helpers for the build-session key schema.

Key schema:

  buildsession:{session_id}
       Type : String (JSON of TourComposer.to_dict())
       TTL  : BUILD_SESSION_TTL (default 7,200 s; reset on each write)

  buildsession:{session_id}:lock
       Type : redis-py Lock, held while one request edits the session

Environment variables (set in config.py):
    REDIS_HOST        default: localhost
    REDIS_PORT        default: 6379
    REDIS_DB          default: 0
    REDIS_PASSWORD    default: ""  (empty = no auth)
    BUILD_SESSION_TTL default: 7200
"""

from __future__ import annotations

import json
from typing import Any

import redis

import config

# Initialised lazily on first call to get_redis()
_client: redis.Redis | None = None


def get_redis() -> redis.Redis:
    """Return the singleton Redis client, creating it on first call."""
    global _client
    if _client is None:
        kwargs: dict[str, Any] = {
            "host":             config.REDIS_HOST,
            "port":             config.REDIS_PORT,
            "db":               config.REDIS_DB,
            "decode_responses": True,   # return str, not bytes
        }
        if config.REDIS_PASSWORD:
            kwargs["password"] = config.REDIS_PASSWORD
        _client = redis.Redis(**kwargs)
    return _client


def _bs_key(session_id: str) -> str:
    return f"buildsession:{session_id}"


def set_build_session(session_id: str, data: dict[str, Any], client: redis.Redis | None = None) -> None:
    """Write the serialised session and reset its TTL."""
    r = client or get_redis()
    r.setex(_bs_key(session_id), config.BUILD_SESSION_TTL, json.dumps(data))


def get_build_session(session_id: str, client: redis.Redis | None = None) -> dict | None:
    """Return the serialised session, or None when expired / never created."""
    r = client or get_redis()
    raw = r.get(_bs_key(session_id))
    return json.loads(raw) if raw is not None else None


def delete_build_session(session_id: str, client: redis.Redis | None = None) -> bool:
    """Drop a session. Returns True if a key was removed."""
    r = client or get_redis()
    return bool(r.delete(_bs_key(session_id)))


def build_session_lock(session_id: str, client: redis.Redis | None = None):
    """
    Per-session lock held across load → mutate → save.

    Expires after BUILD_SESSION_LOCK_TIMEOUT seconds if a worker dies while
    holding it; entering raises LockError when not acquired in time.
    """
    r = client or get_redis()
    return r.lock(
        f"{_bs_key(session_id)}:lock",
        timeout=config.BUILD_SESSION_LOCK_TIMEOUT,
        blocking_timeout=config.BUILD_SESSION_LOCK_WAIT,
    )
