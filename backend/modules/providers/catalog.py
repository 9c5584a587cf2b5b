"""
modules/providers/catalog.py
-----------------------------
CatalogProvider — the predefined tours shown in browse mode, plus the admin
write path (create / update / delete).

Writes validate the route before any database call; a malformed route
never leaves the process.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, ContextManager, Optional

import psycopg2

from db.connection import get_conn
from db.repositories import tour_repo
from modules.composition.errors import FetchError
from modules.validation import parse_route_coordinates, require_valid, validate_tour
from schemas.tour import PredefinedTour

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TourQuote:
    """Browse-mode price line for one tour and a chosen group size."""
    tour_id: str
    people: int
    stops: int
    total_price: Optional[float]   # None when the tour has no display price

    @classmethod
    def for_tour(cls, tour: PredefinedTour, people: int) -> "TourQuote":
        total = tour.display_price * people if tour.display_price is not None else None
        return cls(tour_id=tour.id, people=people, stops=tour.stops, total_price=total)


class CatalogProvider:
    """Access to the `predefined_tours` table."""

    def __init__(self, conn_factory: Callable[[], ContextManager] = get_conn) -> None:
        self._conn_factory = conn_factory

    # ── read ──────────────────────────────────────────────────────────────

    def list_tours(self) -> list[PredefinedTour]:
        """All predefined tours, newest first. Raises FetchError."""
        try:
            with self._conn_factory() as conn:
                rows = tour_repo.list_tours(conn)
        except psycopg2.Error as exc:
            logger.error("Error fetching tours: %s", exc)
            raise FetchError("Failed to load tours. Please try again.") from exc
        return [PredefinedTour.from_row(r) for r in rows]

    def get_tour(self, tour_id: str) -> Optional[PredefinedTour]:
        try:
            with self._conn_factory() as conn:
                row = tour_repo.get_tour(conn, tour_id)
        except psycopg2.Error as exc:
            logger.error("Error fetching tour %s: %s", tour_id, exc)
            raise FetchError("Failed to load tour. Please try again.") from exc
        return PredefinedTour.from_row(row) if row else None

    # ── admin write ───────────────────────────────────────────────────────

    def create_tour(self, values: dict[str, Any]) -> PredefinedTour:
        record = self._clean(values)
        try:
            with self._conn_factory() as conn:
                row = tour_repo.insert_tour(conn, record)
        except psycopg2.Error as exc:
            logger.error("Error saving tour: %s", exc)
            raise FetchError("Failed to save tour. Please try again.") from exc
        logger.info("Tour created: %s (%s)", row["id"], record["name"])
        return PredefinedTour.from_row(row)

    def update_tour(self, tour_id: str, values: dict[str, Any]) -> Optional[PredefinedTour]:
        """Returns None when no tour has ``tour_id``."""
        record = self._clean(values)
        try:
            with self._conn_factory() as conn:
                row = tour_repo.update_tour(conn, tour_id, record)
        except psycopg2.Error as exc:
            logger.error("Error saving tour %s: %s", tour_id, exc)
            raise FetchError("Failed to save tour. Please try again.") from exc
        return PredefinedTour.from_row(row) if row else None

    def delete_tour(self, tour_id: str) -> bool:
        try:
            with self._conn_factory() as conn:
                deleted = tour_repo.delete_tour(conn, tour_id)
        except psycopg2.Error as exc:
            logger.error("Error deleting tour %s: %s", tour_id, exc)
            raise FetchError("Failed to delete tour. Please try again.") from exc
        if deleted:
            logger.info("Tour deleted: %s", tour_id)
        return deleted

    # ── internals ─────────────────────────────────────────────────────────

    @staticmethod
    def _clean(values: dict[str, Any]) -> dict[str, Any]:
        """Validate the form and normalise it into repository input."""
        require_valid(validate_tour(values))
        price = values.get("display_price")
        return {
            "name":              str(values["name"]).strip(),
            "description":       values.get("description") or "",
            "route_coordinates": parse_route_coordinates(values["route_coordinates"]),
            "display_price":     float(price) if price not in (None, "") else None,
            "display_duration":  values.get("display_duration") or None,
        }
