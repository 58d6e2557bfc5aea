"""
BusinessFinder - High-level API for Google Maps business search.

Owns the HTTP client and wires the pipeline components together:
geocoding, paginated search, result assembly and detail enrichment.

Usage:
    from gmaps_finder import BusinessFinder

    async with BusinessFinder(api_key="...") as finder:
        result = await finder.find("Plano, TX", 10, "pizza", max_results=50)
        for place in result:
            print(place.name, place.distance_miles)

Or synchronously:
    from gmaps_finder import find_businesses
    result = find_businesses("Plano, TX", 10, "pizza")
"""

import asyncio
import logging
from typing import Optional, Sequence

import httpx

from .api_client import PlacesApiClient
from .config import DEFAULT_SEARCH_MAX_RESULTS
from .config_manager import FinderConfig
from .extraction import DetailEnricher, PlaceSearchClient, SearchOrchestrator, SearchResultSet
from .extraction.results import ProgressCallback
from .geo import GeoLocator
from .models import PlaceDetails, PlaceRecord

logger = logging.getLogger(__name__)


class BusinessFinder:
    """High-level interface for business search and enrichment.

    Use as an async context manager so the HTTP client is closed.

    Args:
        config: FinderConfig; built from the environment when omitted.
        api_key: Overrides config.api_key.
        transport: Optional httpx transport (e.g. httpx.MockTransport).

    Raises:
        ConfigurationError: No API key available.

    Example:
        async with BusinessFinder() as finder:
            result = await finder.search("Austin, TX", 5, "coffee")
            print(f"Found {len(result)} places")
    """

    def __init__(
        self,
        config: Optional[FinderConfig] = None,
        *,
        api_key: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        config = config or FinderConfig.from_env()
        if api_key is not None:
            config = config.with_overrides(api_key=api_key)
        self.config = config

        self.client = PlacesApiClient(config, transport=transport)
        self.geolocator = GeoLocator(self.client)
        self.search_client = PlaceSearchClient(self.client, config)
        self.orchestrator = SearchOrchestrator(config, self.geolocator, self.search_client)
        self.enricher = DetailEnricher(self.client, config)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()
        return False

    async def aclose(self):
        await self.client.aclose()

    async def search(
        self,
        location: str,
        radius_miles: float,
        keyword: str,
        max_results: Optional[int] = DEFAULT_SEARCH_MAX_RESULTS,
        country: Optional[str] = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> SearchResultSet:
        """Free-keyword search (single text search). See SearchOrchestrator.search."""
        return await self.orchestrator.search(
            location, radius_miles, keyword, max_results, country, on_progress,
        )

    async def search_category(
        self,
        location: str,
        radius_miles: float,
        business_type: str,
        max_results: Optional[int] = None,
        country: Optional[str] = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> SearchResultSet:
        """Category search (place types plus keyword synonyms)."""
        return await self.orchestrator.search_category(
            location, radius_miles, business_type, max_results, country, on_progress,
        )

    async def enrich(
        self,
        records: Sequence[PlaceRecord],
        on_progress: Optional[ProgressCallback] = None,
    ) -> list:
        """Fetch details for the first max_detailed_results records."""
        return await self.enricher.enrich(records, on_progress)

    async def get_place_details(self, place_id: str) -> PlaceDetails:
        return await self.enricher.fetch_details(place_id)

    async def find(
        self,
        location: str,
        radius_miles: float,
        keyword: str,
        *,
        max_results: Optional[int] = DEFAULT_SEARCH_MAX_RESULTS,
        country: Optional[str] = None,
        details: bool = True,
        category: bool = False,
        on_progress: Optional[ProgressCallback] = None,
    ) -> SearchResultSet:
        """
        Search, then optionally enrich the results.

        Args:
            location: Location to search
            radius_miles: Search radius in miles
            keyword: Keyword, or business type when category=True
            max_results: Maximum places to return
            country: Country code restriction for geocoding
            details: Whether to run detail enrichment
            category: Use the category entry point instead of free keyword
            on_progress: Callback receiving (percent, status)

        Returns:
            SearchResultSet with (optionally) enriched places
        """
        if category:
            result = await self.search_category(
                location, radius_miles, keyword, max_results, country, on_progress,
            )
        else:
            result = await self.search(
                location, radius_miles, keyword, max_results, country, on_progress,
            )

        if details and len(result) > 0:
            result.places = await self.enrich(result.places, on_progress)
            result.statistics["enriched"] = min(len(result), self.config.max_detailed_results)
        else:
            result.statistics["enriched"] = 0
        return result


def find_businesses(
    location: str,
    radius_miles: float,
    keyword: str,
    config: Optional[FinderConfig] = None,
    **kwargs,
) -> SearchResultSet:
    """Synchronous wrapper around BusinessFinder.find."""

    async def _run():
        async with BusinessFinder(config) as finder:
            return await finder.find(location, radius_miles, keyword, **kwargs)

    return asyncio.run(_run())
