"""
modules/validation package — data quality guards before any admin DB write.
"""
from modules.validation.tour_validator import (
    ValidationResult,
    dump_route_coordinates,
    parse_route_coordinates,
    require_valid,
    validate_settings,
    validate_tour,
)

__all__ = [
    "ValidationResult",
    "dump_route_coordinates",
    "parse_route_coordinates",
    "require_valid",
    "validate_settings",
    "validate_tour",
]
