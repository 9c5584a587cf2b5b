#!/usr/bin/env python
"""
scripts/run_migrations.py
--------------------------
Applies db/schema.sql to the configured Postgres database and seeds the
default tour_settings row.

Usage:
    python scripts/run_migrations.py [--dry-run] [--no-seed]

Exit codes:
    0 — migrations applied successfully (or dry-run completed)
    1 — connection failed or SQL error

Environment variables: POSTGRES_* (same vars used by db/connection.py)

Notes:
    - All statements run in one transaction: all-or-nothing.
    - Re-running is idempotent (IF NOT EXISTS everywhere, seed uses
      ON CONFLICT DO NOTHING).
"""

from __future__ import annotations

import argparse
import pathlib
import re
import sys

# Add the backend directory to sys.path so that config is importable
_BACKEND_DIR = pathlib.Path(__file__).resolve().parent.parent
sys.path.insert(0, str(_BACKEND_DIR))

import psycopg2

import config
from db.connection import connect_kwargs
from db.repositories import settings_repo

_SQL_FILE = _BACKEND_DIR / "db" / "schema.sql"


def _read_sql() -> str:
    if not _SQL_FILE.exists():
        raise FileNotFoundError(f"SQL file not found: {_SQL_FILE}")
    return _SQL_FILE.read_text(encoding="utf-8")


def split_statements(sql: str) -> list[str]:
    """Drop /* */ and -- comments, split on semicolons, skip blanks."""
    sql = re.sub(r"/\*.*?\*/", "", sql, flags=re.DOTALL)
    sql = re.sub(r"--[^\n]*", "", sql)
    return [s.strip() for s in sql.split(";") if s.strip()]


def run(dry_run: bool = False, seed: bool = True) -> None:
    statements = split_statements(_read_sql())

    print(f"[migrations] SQL file   : {_SQL_FILE}")
    print(f"[migrations] Statements : {len(statements)}")
    print(f"[migrations] Target DB  : {config.POSTGRES_DB} @ "
          f"{config.POSTGRES_HOST}:{config.POSTGRES_PORT}")

    if dry_run:
        print("[migrations] DRY-RUN — no changes applied.")
        for i, stmt in enumerate(statements, 1):
            preview = stmt[:80].replace("\n", " ")
            print(f"  [{i:03d}] {preview}...")
        return

    conn = psycopg2.connect(**connect_kwargs())
    conn.autocommit = False
    try:
        with conn.cursor() as cur:
            for i, stmt in enumerate(statements, 1):
                try:
                    cur.execute(stmt)
                except psycopg2.Error as exc:
                    print(f"  [✗] Statement {i} failed: {exc.pgerror or exc}")
                    raise
                print(f"  [✓] {stmt[:60].replace(chr(10), ' ')}")
        if seed:
            settings_repo.seed_settings(conn, config.DEFAULT_TOUR_SETTINGS, config.SETTINGS_ROW_ID)
            print("  [✓] tour_settings default row")
        conn.commit()
        print(f"[migrations] Done — {len(statements)} statements applied.")
    except Exception:
        conn.rollback()
        print("[migrations] ROLLED BACK due to error.")
        raise
    finally:
        conn.close()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Apply Postgres schema migrations.")
    parser.add_argument("--dry-run", action="store_true",
                        help="Print statements without executing them.")
    parser.add_argument("--no-seed", action="store_true",
                        help="Do not insert the default tour_settings row.")
    args = parser.parse_args()
    try:
        run(dry_run=args.dry_run, seed=not args.no_seed)
    except Exception as exc:
        print(f"[migrations] ERROR: {exc}", file=sys.stderr)
        sys.exit(1)
