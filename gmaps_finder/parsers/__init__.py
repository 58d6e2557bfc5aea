"""
Parsers module for Google Maps Platform responses.

- places.py: Validate Places API payloads and normalize places
"""

from .places import (
    PlaceEntry,
    SearchPage,
    normalize_place,
    parse_details,
    parse_hours,
    parse_price_level,
)
