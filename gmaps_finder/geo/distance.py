"""
Distance Calculations

Great-circle distance between coordinates and radius unit conversions.
"""

import logging
import math

from ..config import (
    EARTH_RADIUS_MILES,
    KM_PER_MILE,
    MAX_PROVIDER_RADIUS_M,
    METERS_PER_MILE,
    MILES_PER_KM,
)
from ..models import Coordinates

logger = logging.getLogger(__name__)


def haversine_miles(lat1: float, lng1: float, lat2: float, lng2: float, precision: int = 1) -> float:
    """
    Distance between two points in miles, rounded to `precision` decimals.

    Args:
        lat1: First latitude
        lng1: First longitude
        lat2: Second latitude
        lng2: Second longitude
        precision: Decimal places to keep (None for no rounding)

    Returns:
        Distance in miles
    """
    d_lat = math.radians(lat2 - lat1)
    d_lng = math.radians(lng2 - lng1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lng / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    distance = EARTH_RADIUS_MILES * c
    if precision is None:
        return distance
    return round(distance, precision)


def distance_between(a: Coordinates, b: Coordinates) -> float:
    """Rounded distance in miles between two Coordinates"""
    return haversine_miles(a.lat, a.lng, b.lat, b.lng)


def miles_to_meters(miles: float) -> int:
    """Convert miles to whole meters (no clamping), dropping the fractional meter"""
    return math.floor(miles * METERS_PER_MILE)


def miles_to_km(miles: float) -> float:
    return miles * KM_PER_MILE


def km_to_miles(km: float) -> float:
    return km * MILES_PER_KM


def radius_to_meters(miles: float, max_meters: int = MAX_PROVIDER_RADIUS_M) -> int:
    """
    Convert a search radius in miles to meters, capped at the provider maximum.

    Radii above the cap are not an error: they are clamped and a warning
    is logged.
    """
    meters = miles_to_meters(miles)
    if meters > max_meters:
        logger.warning(
            "Radius %s miles (%d meters) exceeds the Places API maximum of %d meters; "
            "using the maximum allowed radius",
            miles, meters, max_meters,
        )
        return max_meters
    return meters
