"""
modules/validation/tour_validator.py
-------------------------------------
Data-quality guards applied to admin writes before any row reaches the
`tour_settings` or `predefined_tours` tables.

  Predefined tour:
    ✓ Non-empty name
    ✓ route_coordinates decodes (JSON text or list) to a non-empty array
    ✓ Every entry is a [latitude, longitude] numeric pair
    ✓ Latitude in [-90, 90], longitude in [-180, 180]
    ✓ display_price >= 0 if present

  Tour settings:
    ✓ max_points, max_people are positive integers
    ✓ start_fee, per_distance_rate, max_distance_radius are >= 0
    ✓ distance_unit, distance_radius_unit in {km, miles}
    ✓ currency_code in config.SUPPORTED_CURRENCIES (case-insensitive)

Usage:
    from modules.validation import validate_tour, require_valid

    result = validate_tour(form)
    require_valid(result)          # raises ValidationError
    coords = parse_route_coordinates(form["route_coordinates"])
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

import config
from modules.composition.errors import ValidationError
from schemas.tour import DistanceUnit


# ── Result dataclass ───────────────────────────────────────────────────────────

@dataclass
class ValidationResult:
    """
    Outcome of a single validation run.

    Attributes:
        valid:  True iff there are zero errors.
        errors: Human-readable list of failure reasons.
        record: The input record dict (for logging purposes).
    """
    valid: bool
    errors: list[str] = field(default_factory=list)
    record: dict = field(default_factory=dict, repr=False)

    def __bool__(self) -> bool:
        return self.valid


def require_valid(result: ValidationResult) -> None:
    """Raise ValidationError carrying every reason when ``result`` failed."""
    if not result.valid:
        raise ValidationError(result.errors)


# ── Route coordinates ──────────────────────────────────────────────────────────

def _route_errors(raw: Any) -> tuple[list[tuple[float, float]], list[str]]:
    errors: list[str] = []

    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except ValueError:
            return [], ["Invalid JSON format for route coordinates"]

    if not isinstance(raw, list):
        return [], ["Route coordinates must be an array"]
    if not raw:
        return [], ["Route coordinates must contain at least one [latitude, longitude] pair"]

    coords: list[tuple[float, float]] = []
    for i, pair in enumerate(raw):
        if not isinstance(pair, (list, tuple)) or len(pair) != 2:
            errors.append(f"route_coordinates[{i}]={pair!r} must be a [latitude, longitude] pair")
            continue
        lat, lng = pair
        if isinstance(lat, bool) or isinstance(lng, bool) \
                or not isinstance(lat, (int, float)) or not isinstance(lng, (int, float)):
            errors.append(f"route_coordinates[{i}]={pair!r} must be numeric")
            continue
        if not (-90.0 <= lat <= 90.0):
            errors.append(f"route_coordinates[{i}] latitude={lat} is outside valid range [-90, 90]")
        if not (-180.0 <= lng <= 180.0):
            errors.append(f"route_coordinates[{i}] longitude={lng} is outside valid range [-180, 180]")
        coords.append((float(lat), float(lng)))

    return coords, errors


def parse_route_coordinates(raw: Any) -> list[tuple[float, float]]:
    """
    Decode the admin form's route field into ordered (lat, lng) tuples.

    Accepts the JSON text typed into the form or an already-decoded list.
    Raises ValidationError on anything else.
    """
    coords, errors = _route_errors(raw)
    if errors:
        raise ValidationError(errors)
    return coords


def dump_route_coordinates(coords: list[tuple[float, float]]) -> str:
    """Serialise a route the way the admin form shows it (JSON array of pairs)."""
    return json.dumps([[lat, lng] for lat, lng in coords], indent=2)


# ── Predefined tour validation ─────────────────────────────────────────────────

def validate_tour(record: dict[str, Any]) -> ValidationResult:
    """Validate a `predefined_tours` record before insert / update."""
    errors: list[str] = []

    name = record.get("name", "")
    if not name or not str(name).strip():
        errors.append("name must not be empty")

    _, route_errors = _route_errors(record.get("route_coordinates"))
    errors.extend(route_errors)

    price = record.get("display_price")
    if price not in (None, ""):
        try:
            if float(price) < 0:
                errors.append(f"display_price={price} must be >= 0")
        except (TypeError, ValueError):
            errors.append(f"display_price={price!r} must be numeric")

    return ValidationResult(valid=len(errors) == 0, errors=errors, record=record)


# ── Tour settings validation ───────────────────────────────────────────────────

_POSITIVE_INTS = ("max_points", "max_people")
_NON_NEGATIVE = ("start_fee", "per_distance_rate", "max_distance_radius")
_UNITS = ("distance_unit", "distance_radius_unit")


def validate_settings(record: dict[str, Any]) -> ValidationResult:
    """Validate a full `tour_settings` record before update."""
    errors: list[str] = []

    for key in _POSITIVE_INTS:
        value = record.get(key)
        try:
            if int(value) != float(value) or int(value) < 1:
                errors.append(f"{key}={value} must be a positive integer")
        except (TypeError, ValueError):
            errors.append(f"{key}={value!r} must be a positive integer")

    for key in _NON_NEGATIVE:
        value = record.get(key)
        try:
            if float(value) < 0:
                errors.append(f"{key}={value} must be >= 0")
        except (TypeError, ValueError):
            errors.append(f"{key}={value!r} must be numeric")

    for key in _UNITS:
        try:
            DistanceUnit.parse(record.get(key))
        except ValueError:
            errors.append(f"{key}={record.get(key)!r} must be 'km' or 'miles'")

    currency = record.get("currency_code")
    if not isinstance(currency, str) or currency.upper() not in config.SUPPORTED_CURRENCIES:
        errors.append(
            f"currency_code={currency!r} must be one of {', '.join(config.SUPPORTED_CURRENCIES)}"
        )

    return ValidationResult(valid=len(errors) == 0, errors=errors, record=record)
