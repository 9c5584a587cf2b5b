"""
modules/composition/engine.py
------------------------------
TourComposer — the custom-tour building engine.

Owns one build session: the ordered waypoints the customer clicked, the
selected number of people and the settings snapshot taken when the session
was opened. Route distance and price are derived on demand and never stored.

Lifecycle:
    composer = TourComposer(settings)

    composer.propose_waypoint(43.5138, 16.2522)   # may raise OutOfRangeError
    composer.propose_waypoint(43.3844, 16.3022)   # may raise LimitReachedError
    composer.remove_waypoint(wid)                 # absent id is a no-op

    composer.compute_route().total_distance
    composer.compute_price()

Checks run in a fixed order: coordinate sanity, geofence, then the point
limit, so a point that is both too far and over the limit reports the
geofence.
"""

from __future__ import annotations

import logging
import math
import uuid
from dataclasses import dataclass
from typing import Any, Callable, Optional

import config
from modules.composition.errors import LimitReachedError, OutOfRangeError, ValidationError
from modules.geo.distance import Coordinate, distance, path_length, radius_meters
from modules.observability.logger import StructuredLogger
from schemas.tour import DistanceUnit, TourSettings, Waypoint

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RouteSummary:
    """Origin followed by the waypoints in click order, plus its length."""
    path: list[Coordinate]
    total_distance: float
    unit: DistanceUnit


@dataclass(frozen=True)
class PriceBreakdown:
    start_fee: float
    distance_fee: float
    total: float
    currency: str


def _new_waypoint_id() -> str:
    return uuid.uuid4().hex


def _coordinate_errors(lat: float, lng: float) -> list[str]:
    # NaN compares False against the geofence radius, so it must stop here
    if not (math.isfinite(lat) and math.isfinite(lng)):
        return [f"lat={lat}, lng={lng} must be finite numbers"]
    errors = []
    if not -90.0 <= lat <= 90.0:
        errors.append(f"latitude={lat} is outside valid range [-90, 90]")
    if not -180.0 <= lng <= 180.0:
        errors.append(f"longitude={lng} is outside valid range [-180, 180]")
    return errors


class TourComposer:
    """
    Single source of truth for one custom tour being built.

    Args:
        settings:    Immutable settings snapshot for the whole session.
        origin:      Home port prepended to the route; defaults to config.
        session_id:  Key used by the session store and the event log.
        people:      Initial occupancy; defaults to min(1, max_people).
        waypoints:   Restored waypoints (session store reload).
        event_log:   Optional JSONL trail of accepted / rejected actions.
        id_factory:  Waypoint id generator (tests pin it).
    """

    def __init__(
        self,
        settings: TourSettings,
        origin: Optional[Coordinate] = None,
        session_id: Optional[str] = None,
        people: Optional[int] = None,
        waypoints: Optional[list[Waypoint]] = None,
        event_log: Optional[StructuredLogger] = None,
        id_factory: Callable[[], str] = _new_waypoint_id,
    ) -> None:
        self.settings   = settings
        self.origin     = origin or (config.ORIGIN_LAT, config.ORIGIN_LON)
        self.session_id = session_id or uuid.uuid4().hex
        self.people     = people if people is not None else min(1, settings.max_people)
        self._waypoints = list(waypoints or [])
        self._event_log = event_log
        self._id_factory = id_factory

    # ── waypoint list ─────────────────────────────────────────────────────

    @property
    def waypoints(self) -> list[Waypoint]:
        """Copy of the waypoints in visit order."""
        return list(self._waypoints)

    def propose_waypoint(self, lat: float, lng: float) -> list[Waypoint]:
        """
        Validate and append a clicked point.

        Raises:
            ValidationError:   lat / lng not finite or outside the globe.
            OutOfRangeError:   geofence enabled and the point lies beyond it.
            LimitReachedError: the waypoint list is already full.

        State is untouched when any error is raised.
        """
        errors = _coordinate_errors(lat, lng)
        if errors:
            self._log("WAYPOINT_REJECTED", {"reason": "invalid", "errors": errors})
            raise ValidationError(errors)

        s = self.settings
        if s.max_distance_radius > 0:
            d = distance(self.origin, (lat, lng), s.distance_radius_unit)
            if d > s.max_distance_radius:
                self._log("WAYPOINT_REJECTED", {
                    "reason": "out_of_range", "lat": lat, "lng": lng, "distance": d,
                })
                raise OutOfRangeError(d, s.max_distance_radius, s.distance_radius_unit.value)

        if len(self._waypoints) >= s.max_points:
            self._log("WAYPOINT_REJECTED", {
                "reason": "limit_reached", "lat": lat, "lng": lng,
            })
            raise LimitReachedError(s.max_points, "points")

        wp = Waypoint(id=self._id_factory(), lat=float(lat), lng=float(lng))
        self._waypoints.append(wp)
        logger.debug("session %s: accepted waypoint %s", self.session_id, wp.id)
        self._log("WAYPOINT_ACCEPTED", wp.to_dict())
        return self.waypoints

    def remove_waypoint(self, waypoint_id: str) -> list[Waypoint]:
        """Drop one waypoint by id; unknown ids leave the list unchanged."""
        remaining = [wp for wp in self._waypoints if wp.id != waypoint_id]
        if len(remaining) != len(self._waypoints):
            self._waypoints = remaining
            self._log("WAYPOINT_REMOVED", {"id": waypoint_id})
        return self.waypoints

    # ── occupancy ─────────────────────────────────────────────────────────

    def set_people(self, people: int) -> int:
        """Select how many people join; bounded by settings.max_people."""
        if people < 1:
            raise ValidationError([f"people={people} must be >= 1"])
        if people > self.settings.max_people:
            raise LimitReachedError(self.settings.max_people, "people")
        self.people = people
        self._log("PEOPLE_SET", {"people": people})
        return self.people

    # ── derived values ────────────────────────────────────────────────────

    def compute_route(self) -> RouteSummary:
        """Origin + waypoints in click order, measured in settings.distance_unit."""
        path = [self.origin] + [wp.position for wp in self._waypoints]
        unit = self.settings.distance_unit
        return RouteSummary(path=path, total_distance=path_length(path, unit), unit=unit)

    def compute_price(self) -> float:
        """start_fee + distance × rate. Occupancy does not change the price."""
        return self.price_breakdown().total

    def price_breakdown(self) -> PriceBreakdown:
        s = self.settings
        distance_fee = self.compute_route().total_distance * s.per_distance_rate
        return PriceBreakdown(
            start_fee=s.start_fee,
            distance_fee=distance_fee,
            total=s.start_fee + distance_fee,
            currency=s.currency_code,
        )

    @property
    def bookable(self) -> bool:
        return len(self._waypoints) >= config.MIN_BOOKABLE_POINTS

    def geofence(self) -> Optional[dict[str, Any]]:
        """Overlay circle for the map, or None when the radius is disabled."""
        s = self.settings
        if s.max_distance_radius <= 0:
            return None
        return {
            "center": list(self.origin),
            "radius": s.max_distance_radius,
            "unit": s.distance_radius_unit.value,
            "radius_meters": radius_meters(s.max_distance_radius, s.distance_radius_unit),
        }

    # ── persistence ───────────────────────────────────────────────────────

    def to_dict(self) -> dict[str, Any]:
        return {
            "session_id": self.session_id,
            "origin": list(self.origin),
            "people": self.people,
            "settings": self.settings.to_dict(),
            "waypoints": [wp.to_dict() for wp in self._waypoints],
        }

    @classmethod
    def from_dict(
        cls,
        data: dict[str, Any],
        event_log: Optional[StructuredLogger] = None,
    ) -> "TourComposer":
        lat, lng = data["origin"]
        return cls(
            settings=TourSettings.from_row(data["settings"]),
            origin=(float(lat), float(lng)),
            session_id=data["session_id"],
            people=int(data["people"]),
            waypoints=[
                Waypoint(id=w["id"], lat=float(w["lat"]), lng=float(w["lng"]))
                for w in data.get("waypoints", [])
            ],
            event_log=event_log,
        )

    # ── internals ─────────────────────────────────────────────────────────

    def _log(self, event_type: str, payload: dict) -> None:
        if self._event_log is not None:
            self._event_log.log(self.session_id, event_type, payload)
