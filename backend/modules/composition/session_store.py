"""
modules/composition/session_store.py
-------------------------------------
Where open build sessions live between HTTP requests.

  InMemorySessionStore — process-local dict (default, single worker)
  RedisSessionStore    — JSON under buildsession:{id} with a sliding TTL

Select with config.SESSION_BACKEND = "in_memory" | "redis".

Both stores expire a session BUILD_SESSION_TTL seconds after its last write;
an expired session loads as None. Route handlers wrap load → mutate → save
in ``store.lock(session_id)`` so two concurrent clicks on one session cannot
overwrite each other or slip past the point limit.
"""

from __future__ import annotations

import threading
import time
from contextlib import contextmanager
from typing import Callable, ContextManager, Iterator, Optional, Protocol

import redis

import config
from db import redis_client
from modules.composition.engine import TourComposer
from modules.composition.errors import FetchError
from modules.observability.logger import StructuredLogger


class SessionStore(Protocol):
    def save(self, composer: TourComposer) -> None: ...
    def load(self, session_id: str) -> Optional[TourComposer]: ...
    def delete(self, session_id: str) -> bool: ...
    def lock(self, session_id: str) -> ContextManager[None]: ...


class InMemorySessionStore:
    """
    Keeps live TourComposer objects; lost on process restart.

    Expired entries are dropped on every save / load, so abandoned sessions
    do not accumulate for the life of the process.
    """

    def __init__(
        self,
        ttl: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl = config.BUILD_SESSION_TTL if ttl is None else ttl
        self._clock = clock
        self._sessions: dict[str, tuple[TourComposer, float]] = {}
        self._locks: dict[str, threading.Lock] = {}
        self._lock = threading.Lock()

    def save(self, composer: TourComposer) -> None:
        with self._lock:
            now = self._clock()
            self._evict(now)
            self._sessions[composer.session_id] = (composer, now)

    def load(self, session_id: str) -> Optional[TourComposer]:
        with self._lock:
            self._evict(self._clock())
            entry = self._sessions.get(session_id)
            return entry[0] if entry else None

    def delete(self, session_id: str) -> bool:
        with self._lock:
            self._locks.pop(session_id, None)
            return self._sessions.pop(session_id, None) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    @contextmanager
    def lock(self, session_id: str) -> Iterator[None]:
        with self._lock:
            session_lock = self._locks.setdefault(session_id, threading.Lock())
        with session_lock:
            yield

    def _evict(self, now: float) -> None:
        # caller holds self._lock
        expired = [sid for sid, (_, touched) in self._sessions.items() if now - touched >= self.ttl]
        for sid in expired:
            del self._sessions[sid]
            self._locks.pop(sid, None)


class RedisSessionStore:
    """Serialises sessions to Redis so any worker can serve them."""

    def __init__(self, client=None, event_log: Optional[StructuredLogger] = None) -> None:
        self._client = client
        self._event_log = event_log

    def save(self, composer: TourComposer) -> None:
        redis_client.set_build_session(composer.session_id, composer.to_dict(), self._client)

    def load(self, session_id: str) -> Optional[TourComposer]:
        data = redis_client.get_build_session(session_id, self._client)
        if data is None:
            return None
        return TourComposer.from_dict(data, event_log=self._event_log)

    def delete(self, session_id: str) -> bool:
        return redis_client.delete_build_session(session_id, self._client)

    @contextmanager
    def lock(self, session_id: str) -> Iterator[None]:
        """Distributed lock shared by every worker; busy → FetchError."""
        try:
            with redis_client.build_session_lock(session_id, self._client):
                yield
        except redis.exceptions.LockError as exc:
            raise FetchError("This tour is being updated. Please try again.") from exc


def build_session_store(event_log: Optional[StructuredLogger] = None) -> SessionStore:
    """Store selected by config.SESSION_BACKEND."""
    if config.SESSION_BACKEND == "redis":
        return RedisSessionStore(event_log=event_log)
    if config.SESSION_BACKEND != "in_memory":
        raise ValueError(f"unknown SESSION_BACKEND: {config.SESSION_BACKEND!r}")
    return InMemorySessionStore()
