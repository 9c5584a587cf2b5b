"""
db/repositories/settings_repo.py
---------------------------------
Read / update the single row of the `tour_settings` table.

All functions accept a psycopg2 connection object.
Commit/rollback is managed by the caller via db.connection.get_conn().
"""

from __future__ import annotations

from typing import Any

_COLUMNS = (
    "max_points", "max_people", "start_fee", "per_distance_rate",
    "distance_unit", "currency_code", "max_distance_radius", "distance_radius_unit",
)


def get_settings(conn, settings_id: int = 1) -> dict | None:
    """Return the settings row as a dict, or None if it does not exist."""
    sql = "SELECT * FROM tour_settings WHERE id = %s"
    with conn.cursor() as cur:
        cur.execute(sql, (settings_id,))
        row = cur.fetchone()
        if row is None:
            return None
        cols = [d[0] for d in cur.description]
        return dict(zip(cols, row))


def update_settings(conn, values: dict[str, Any], settings_id: int = 1) -> dict | None:
    """
    Full-record update of the settings row, stamping updated_at = NOW().

    Every column in _COLUMNS must be present in ``values``.
    Returns the updated row, or None when the row does not exist.
    """
    assignments = ", ".join(f"{c} = %({c})s" for c in _COLUMNS)
    sql = f"""
        UPDATE tour_settings
           SET {assignments}, updated_at = NOW()
         WHERE id = %(id)s
        RETURNING *
    """
    params = {c: values[c] for c in _COLUMNS}
    params["id"] = settings_id
    with conn.cursor() as cur:
        cur.execute(sql, params)
        row = cur.fetchone()
        if row is None:
            return None
        cols = [d[0] for d in cur.description]
        return dict(zip(cols, row))


def seed_settings(conn, defaults: dict[str, Any], settings_id: int = 1) -> None:
    """Insert the default row if the table is empty (used by migrations)."""
    cols = ", ".join(("id",) + _COLUMNS)
    placeholders = ", ".join(["%(id)s"] + [f"%({c})s" for c in _COLUMNS])
    sql = f"""
        INSERT INTO tour_settings ({cols})
        VALUES ({placeholders})
        ON CONFLICT (id) DO NOTHING
    """
    with conn.cursor() as cur:
        cur.execute(sql, {**defaults, "id": settings_id})
