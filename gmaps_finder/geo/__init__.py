"""
Geographic utilities module.

- distance.py: Haversine distance and radius unit conversions
- geocoder.py: Location text to coordinates via the Geocoding API
"""

from .distance import (
    distance_between,
    haversine_miles,
    km_to_miles,
    miles_to_km,
    miles_to_meters,
    radius_to_meters,
)
from .geocoder import GeoLocator
