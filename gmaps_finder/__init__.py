"""
Google Maps Business Finder

A Python library for finding businesses near a location with the Google
Places API: geocode, search, filter by true distance, and enrich with details.

Quick start (library usage):
    from gmaps_finder import BusinessFinder

    async with BusinessFinder(api_key="...") as finder:
        result = await finder.find("Plano, TX", 10, "pizza", max_results=50)
        for place in result:
            print(place.name, place.distance_miles)

Or synchronously:
    from gmaps_finder import find_businesses
    result = find_businesses("Plano, TX", 10, "pizza")
"""

from .config import OUTPUT_SCHEMA
from .config_manager import FinderConfig
from .exceptions import (
    AuthenticationError,
    ConfigurationError,
    DetailFetchError,
    FinderError,
    LocationNotFound,
    ProviderPageError,
    TransportError,
)
from .extraction.results import SearchResultSet
from .extractor import BusinessFinder, find_businesses
from .models import Coordinates, PlaceDetails, PlaceRecord

__version__ = "1.0.0"
__all__ = [
    "BusinessFinder",
    "find_businesses",
    "FinderConfig",
    "SearchResultSet",
    "PlaceRecord",
    "PlaceDetails",
    "Coordinates",
    "FinderError",
    "LocationNotFound",
    "ProviderPageError",
    "DetailFetchError",
    "TransportError",
    "ConfigurationError",
    "AuthenticationError",
    "OUTPUT_SCHEMA",
]
