"""
db/repositories/tour_repo.py
-----------------------------
CRUD operations for the `predefined_tours` table.

route_coordinates is a jsonb column holding an array of [lat, lng] pairs.

All functions accept a psycopg2 connection object.
Commit/rollback is managed by the caller via db.connection.get_conn().
"""

from __future__ import annotations

import json
from typing import Any


def _row(cur) -> dict | None:
    row = cur.fetchone()
    if row is None:
        return None
    cols = [d[0] for d in cur.description]
    return dict(zip(cols, row))


def _params(tour: dict[str, Any]) -> dict[str, Any]:
    return {
        "name":              tour["name"],
        "description":       tour.get("description") or "",
        "route_coordinates": json.dumps([list(p) for p in tour["route_coordinates"]]),
        "display_price":     tour.get("display_price"),
        "display_duration":  tour.get("display_duration") or None,
    }


def list_tours(conn) -> list[dict]:
    """All tours, most recently created first."""
    sql = "SELECT * FROM predefined_tours ORDER BY created_at DESC"
    with conn.cursor() as cur:
        cur.execute(sql)
        cols = [d[0] for d in cur.description]
        return [dict(zip(cols, r)) for r in cur.fetchall()]


def get_tour(conn, tour_id: str) -> dict | None:
    """Return a single tour row by UUID, or None if not found."""
    sql = "SELECT * FROM predefined_tours WHERE id = %s"
    with conn.cursor() as cur:
        cur.execute(sql, (tour_id,))
        return _row(cur)


def insert_tour(conn, tour: dict[str, Any]) -> dict:
    """
    Insert a new tour row and return it.

    Required keys: name, route_coordinates (list of [lat, lng]).
    Optional keys: description, display_price, display_duration.
    """
    sql = """
        INSERT INTO predefined_tours (
            name, description, route_coordinates, display_price, display_duration
        ) VALUES (
            %(name)s, %(description)s, %(route_coordinates)s::jsonb,
            %(display_price)s, %(display_duration)s
        )
        RETURNING *
    """
    with conn.cursor() as cur:
        cur.execute(sql, _params(tour))
        return _row(cur)


def update_tour(conn, tour_id: str, tour: dict[str, Any]) -> dict | None:
    """Replace every editable field of a tour; None when the id is unknown."""
    sql = """
        UPDATE predefined_tours
           SET name = %(name)s,
               description = %(description)s,
               route_coordinates = %(route_coordinates)s::jsonb,
               display_price = %(display_price)s,
               display_duration = %(display_duration)s,
               updated_at = NOW()
         WHERE id = %(id)s
        RETURNING *
    """
    params = _params(tour)
    params["id"] = tour_id
    with conn.cursor() as cur:
        cur.execute(sql, params)
        return _row(cur)


def delete_tour(conn, tour_id: str) -> bool:
    """Delete a tour. Returns True if a row was removed."""
    sql = "DELETE FROM predefined_tours WHERE id = %s"
    with conn.cursor() as cur:
        cur.execute(sql, (tour_id,))
        return cur.rowcount > 0
