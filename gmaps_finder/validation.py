"""
Input validation shared by the CLI and the HTTP server.
"""

from typing import Optional

from .config import MILES_PER_KM
from .config_manager import FinderConfig

RADIUS_UNITS = ("miles", "kilometers")


def validate_text(value: Optional[str], label: str) -> str:
    """Location and keyword need at least 2 non-blank characters."""
    if not value or len(value.strip()) < 2:
        raise ValueError(f"Please enter a valid {label}")
    return value.strip()


def radius_in_miles(radius: float, unit: str, config: FinderConfig) -> float:
    """
    Validate a radius in the given unit and convert it to miles.

    Raises:
        ValueError: Unknown unit or radius outside 1..max for that unit
    """
    if unit not in RADIUS_UNITS:
        raise ValueError(f"Radius unit must be one of: {', '.join(RADIUS_UNITS)}")

    max_value = config.max_radius_km if unit == "kilometers" else config.max_radius_miles
    if radius < 1 or radius > max_value:
        raise ValueError(f"Search radius must be between 1 and {max_value} {unit}")

    return radius * MILES_PER_KM if unit == "kilometers" else float(radius)


def validate_max_results(max_results: int, config: FinderConfig) -> int:
    if max_results < 1 or max_results > config.max_results:
        raise ValueError(f"Maximum results must be between 1 and {config.max_results}")
    return max_results
