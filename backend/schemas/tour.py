"""
schemas/tour.py
---------------
Dataclass definitions for the tour catalog, the global tour settings record
and the waypoints of a custom tour.

Coordinates are always (latitude, longitude) in signed decimal degrees.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Optional


class DistanceUnit(str, Enum):
    """Units accepted for route distance and the geofence radius."""
    KM = "km"
    MILES = "miles"

    @classmethod
    def parse(cls, value: Any) -> "DistanceUnit":
        """Accept the stored short form plus the long names used in forms."""
        if isinstance(value, cls):
            return value
        text = str(value).strip().lower()
        if text in ("km", "kilometers", "kilometres"):
            return cls.KM
        if text in ("mi", "mile", "miles"):
            return cls.MILES
        raise ValueError(f"unsupported distance unit: {value!r}")


@dataclass(frozen=True)
class TourSettings:
    """
    The single global tour configuration record (`tour_settings`, id = 1).

    Read by the composition engine as an immutable snapshot: edits made by an
    administrator apply to build sessions opened afterwards.

      max_distance_radius — geofence around the origin; 0 disables it
      distance_unit       — unit of route distance and per_distance_rate
      distance_radius_unit — unit of max_distance_radius only
    """
    max_points: int = 5
    max_people: int = 12
    start_fee: float = 50.0
    per_distance_rate: float = 3.0
    distance_unit: DistanceUnit = DistanceUnit.KM
    currency_code: str = "EUR"
    max_distance_radius: float = 30.0
    distance_radius_unit: DistanceUnit = DistanceUnit.KM
    id: int = 1
    created_at: Optional[str] = None   # ISO-8601
    updated_at: Optional[str] = None   # ISO-8601

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "TourSettings":
        """Build from a DB row / JSON dict; unknown keys are ignored."""
        return cls(
            id=int(row.get("id", 1)),
            max_points=int(row["max_points"]),
            max_people=int(row["max_people"]),
            start_fee=float(row["start_fee"]),
            per_distance_rate=float(row["per_distance_rate"]),
            distance_unit=DistanceUnit.parse(row["distance_unit"]),
            currency_code=str(row["currency_code"]),
            max_distance_radius=float(row["max_distance_radius"]),
            distance_radius_unit=DistanceUnit.parse(row["distance_radius_unit"]),
            created_at=_iso(row.get("created_at")),
            updated_at=_iso(row.get("updated_at")),
        )

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["distance_unit"] = self.distance_unit.value
        data["distance_radius_unit"] = self.distance_radius_unit.value
        return data


@dataclass
class PredefinedTour:
    """An administrator-authored tour with a fixed route."""
    id: str = ""
    name: str = ""
    description: str = ""
    route_coordinates: list[tuple[float, float]] = field(default_factory=list)
    display_price: Optional[float] = None
    display_duration: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @property
    def stops(self) -> int:
        return len(self.route_coordinates)

    @property
    def start(self) -> Optional[tuple[float, float]]:
        """First route position; the implicit start of the tour."""
        return self.route_coordinates[0] if self.route_coordinates else None

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "PredefinedTour":
        price = row.get("display_price")
        return cls(
            id=str(row["id"]),
            name=row.get("name") or "",
            description=row.get("description") or "",
            route_coordinates=[
                (float(lat), float(lng)) for lat, lng in row.get("route_coordinates") or []
            ],
            display_price=float(price) if price is not None else None,
            display_duration=row.get("display_duration"),
            created_at=_iso(row.get("created_at")),
            updated_at=_iso(row.get("updated_at")),
        )

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["route_coordinates"] = [[lat, lng] for lat, lng in self.route_coordinates]
        return data


@dataclass(frozen=True)
class Waypoint:
    """A user-selected stop of a custom tour. Insertion order is visit order."""
    id: str
    lat: float
    lng: float

    @property
    def position(self) -> tuple[float, float]:
        return (self.lat, self.lng)

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "lat": self.lat, "lng": self.lng}


def _iso(value: Any) -> Optional[str]:
    """psycopg2 hands back datetime objects; JSON hands back strings."""
    if value is None:
        return None
    return value.isoformat() if hasattr(value, "isoformat") else str(value)
