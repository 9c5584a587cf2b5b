"""
modules/providers/settings.py
------------------------------
SettingsProvider — reads and (admin only) updates the global tour settings.

Database failures surface as FetchError; the caller shows a retry action,
nothing here retries on its own.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, ContextManager

import psycopg2

import config
from db.connection import get_conn
from db.repositories import settings_repo
from modules.composition.errors import FetchError
from modules.validation import require_valid, validate_settings
from schemas.tour import DistanceUnit, TourSettings

logger = logging.getLogger(__name__)


class SettingsProvider:
    """Access to the single `tour_settings` row."""

    def __init__(
        self,
        conn_factory: Callable[[], ContextManager] = get_conn,
        settings_id: int = config.SETTINGS_ROW_ID,
    ) -> None:
        self._conn_factory = conn_factory
        self.settings_id = settings_id

    def get_configuration(self) -> TourSettings:
        """Fetch the active settings record. Raises FetchError."""
        try:
            with self._conn_factory() as conn:
                row = settings_repo.get_settings(conn, self.settings_id)
        except psycopg2.Error as exc:
            logger.error("Error fetching settings: %s", exc)
            raise FetchError("Failed to load tour settings. Please try again.") from exc
        if row is None:
            raise FetchError(f"Tour settings row id={self.settings_id} is missing")
        return TourSettings.from_row(row)

    def update_configuration(self, values: dict[str, Any]) -> TourSettings:
        """
        Replace the whole settings record and stamp updated_at.

        Raises ValidationError before touching the database when a field is
        malformed, FetchError when the write fails.
        """
        require_valid(validate_settings(values))
        clean = {
            "max_points":           int(values["max_points"]),
            "max_people":           int(values["max_people"]),
            "start_fee":            float(values["start_fee"]),
            "per_distance_rate":    float(values["per_distance_rate"]),
            "distance_unit":        DistanceUnit.parse(values["distance_unit"]).value,
            "currency_code":        str(values["currency_code"]).upper(),
            "max_distance_radius":  float(values["max_distance_radius"]),
            "distance_radius_unit": DistanceUnit.parse(values["distance_radius_unit"]).value,
        }
        try:
            with self._conn_factory() as conn:
                row = settings_repo.update_settings(conn, clean, self.settings_id)
        except psycopg2.Error as exc:
            logger.error("Error saving settings: %s", exc)
            raise FetchError("Failed to save settings. Please try again.") from exc
        if row is None:
            raise FetchError(f"Tour settings row id={self.settings_id} is missing")
        logger.info("Tour settings updated: %s", clean)
        return TourSettings.from_row(row)
