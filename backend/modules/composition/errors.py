"""
modules/composition/errors.py
------------------------------
Exception taxonomy shared by the composition engine, the providers and the
admin validators.

  OutOfRangeError   — proposed point lies outside the geofence
  LimitReachedError — waypoint or occupancy ceiling hit
  FetchError        — settings / catalog / auth backend unreachable or failed
  ValidationError   — malformed admin input, rejected before any DB call

All are recoverable: the API turns them into an inline error response.
"""

from __future__ import annotations


class TourError(Exception):
    """Base class for every error raised by the tour domain."""


class OutOfRangeError(TourError):
    """Candidate point is farther from the origin than the geofence allows."""

    def __init__(self, distance: float, limit: float, unit: str) -> None:
        self.distance = distance
        self.limit = limit
        self.unit = unit
        super().__init__(
            f"Point is outside the allowed radius "
            f"({distance:.2f} {unit} from origin, limit {limit:g} {unit})"
        )


class LimitReachedError(TourError):
    """A configured ceiling (waypoints or people) has been reached."""

    def __init__(self, limit: int, what: str = "points") -> None:
        self.limit = limit
        self.what = what
        super().__init__(f"Maximum number of {what} ({limit}) reached")


class FetchError(TourError):
    """The persistence or auth service failed; the caller may retry manually."""


class ValidationError(TourError):
    """One or more fields of an admin write are malformed."""

    def __init__(self, errors: list[str]) -> None:
        self.errors = list(errors)
        super().__init__("; ".join(self.errors) or "invalid input")
