"""
db/connection.py
-----------------
psycopg2 ThreadedConnectionPool for the hosted Postgres database —
singleton, shared across the process.

Usage:
    from db.connection import get_conn

    with get_conn() as conn:
        settings_repo.get_settings(conn)

The context manager borrows a connection from the pool, commits on clean
exit, rolls back on exception, and returns the connection to the pool.

Environment variables (set in config.py):
    POSTGRES_HOST, POSTGRES_PORT, POSTGRES_DB, POSTGRES_USER,
    POSTGRES_PASSWORD, POSTGRES_SSLMODE, POSTGRES_MIN_CONN, POSTGRES_MAX_CONN
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Generator

import psycopg2
import psycopg2.pool

import config

# Initialised lazily on first call to get_conn()
_pool: psycopg2.pool.ThreadedConnectionPool | None = None


def connect_kwargs() -> dict:
    """Connection parameters shared by the pool and scripts/run_migrations.py."""
    return {
        "host":     config.POSTGRES_HOST,
        "port":     config.POSTGRES_PORT,
        "dbname":   config.POSTGRES_DB,
        "user":     config.POSTGRES_USER,
        "password": config.POSTGRES_PASSWORD,
        "sslmode":  config.POSTGRES_SSLMODE,
    }


def get_pool() -> psycopg2.pool.ThreadedConnectionPool:
    """Return the singleton connection pool, creating it on first call."""
    global _pool
    if _pool is None or _pool.closed:
        _pool = psycopg2.pool.ThreadedConnectionPool(
            minconn=config.POSTGRES_MIN_CONN,
            maxconn=config.POSTGRES_MAX_CONN,
            **connect_kwargs(),
        )
    return _pool


@contextmanager
def get_conn() -> Generator:
    """
    Borrow a connection; commit on success, roll back and re-raise on error.
    """
    pool = get_pool()
    conn = pool.getconn()
    try:
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        pool.putconn(conn)


def close_pool() -> None:
    """Close all connections in the pool (call at application shutdown)."""
    global _pool
    if _pool and not _pool.closed:
        _pool.closeall()
    _pool = None
