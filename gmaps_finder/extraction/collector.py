"""
Search Orchestration

Geocodes the location, builds the search tasks, runs them in bounded
concurrent batches, and assembles the merged results (dedupe, radius
filter, distance sort, cap).
"""

import asyncio
import logging
from typing import List, Optional, Sequence

from ..config_manager import FinderConfig
from ..geo import GeoLocator, radius_to_meters
from ..models import Coordinates, PlaceRecord, SearchKind, SearchTask
from .results import (
    ProgressCallback,
    ProgressReporter,
    SearchResultSet,
    assemble_results,
    gather_batch,
)
from .search import PlaceSearchClient

logger = logging.getLogger(__name__)


def build_keyword_tasks(keyword: str) -> List[SearchTask]:
    """Free-keyword search: a single text search for the literal keyword."""
    return [SearchTask(kind=SearchKind.TEXT, query=keyword, priority=1)]


def build_category_tasks(business_type: str, config: FinderConfig) -> List[SearchTask]:
    """
    Category search: one nearby search per place type, then one text search
    per keyword synonym.

    Raises:
        ValueError: Unknown business type
    """
    if business_type not in config.business_types and business_type not in config.search_keywords:
        known = ", ".join(sorted(set(config.business_types) | set(config.search_keywords)))
        raise ValueError(f"Unknown business type {business_type!r} (expected one of: {known})")

    types = config.business_types.get(business_type, [])
    if isinstance(types, str):
        types = [types]
    keywords = config.search_keywords.get(business_type, [])

    tasks = [SearchTask(kind=SearchKind.NEARBY, query=t, priority=1) for t in types]
    tasks += [SearchTask(kind=SearchKind.TEXT, query=k, priority=2) for k in keywords]
    return sorted(tasks, key=lambda t: t.priority)


class SearchOrchestrator:
    """Runs a full search for a location, radius and keyword."""

    def __init__(self, config: FinderConfig, geolocator: GeoLocator, search_client: PlaceSearchClient):
        self.config = config
        self.geolocator = geolocator
        self.search_client = search_client

    async def search(
        self,
        location: str,
        radius_miles: float,
        keyword: str,
        max_results: Optional[int] = None,
        country: Optional[str] = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> SearchResultSet:
        """
        Search for businesses by location, radius and keyword.

        Args:
            location: Location to search (city, state, ZIP, address)
            radius_miles: Search radius in miles
            keyword: Business keyword to search for
            max_results: Maximum number of places to return
            country: Country code (e.g. 'US', 'GB', 'CA')
            on_progress: Callback receiving (percent, status)

        Returns:
            SearchResultSet ordered by distance

        Raises:
            LocationNotFound: The location could not be geocoded
        """
        return await self._run(
            location, radius_miles, build_keyword_tasks(keyword),
            max_results, country, on_progress, label=keyword,
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
        """Search using the configured place types and keyword synonyms for a category."""
        tasks = build_category_tasks(business_type, self.config)
        return await self._run(
            location, radius_miles, tasks,
            max_results, country, on_progress, label=business_type,
        )

    async def _run(
        self,
        location: str,
        radius_miles: float,
        tasks: List[SearchTask],
        max_results: Optional[int],
        country: Optional[str],
        on_progress: Optional[ProgressCallback],
        label: str,
    ) -> SearchResultSet:
        if radius_miles <= 0:
            raise ValueError("radius_miles must be positive")

        progress = ProgressReporter(on_progress)
        metadata = {
            "location": location,
            "keyword": label,
            "radius_miles": radius_miles,
            "country": country,
            "max_results": max_results,
        }

        progress(5, "Getting coordinates for location...")
        center = await self.geolocator.resolve(location, country)
        metadata["center"] = {"lat": center.lat, "lng": center.lng}
        progress(10, "Coordinates found, starting search...")

        radius_meters = radius_to_meters(radius_miles)
        metadata["radius_meters"] = radius_meters

        progress(15, f"Starting {len(tasks)} search{'es' if len(tasks) != 1 else ''} for \"{label}\"...")
        all_results = await self.execute_tasks(center, radius_meters, tasks, progress)

        progress(85, "Processing results...")
        if not all_results:
            progress(100, "No results found")
            return SearchResultSet(
                [],
                metadata=metadata,
                statistics={"total_raw": 0, "unique": 0, "within_radius": 0, "returned": 0},
            )

        result = assemble_results(
            all_results, radius_miles, max_results, self.config.max_results, metadata=metadata,
        )
        progress(
            90,
            f"Found {result.statistics['within_radius']} unique results within {radius_miles} miles",
        )
        progress(100, "Search completed!")
        return result

    async def execute_tasks(
        self,
        center: Coordinates,
        radius_meters: int,
        tasks: Sequence[SearchTask],
        progress: Optional[ProgressReporter] = None,
    ) -> List[PlaceRecord]:
        """
        Run tasks in batches of max_parallel_searches.

        Each batch is awaited as a whole before the next starts; results
        are concatenated in task order. An AuthenticationError from any
        task is raised once its siblings have settled.
        """
        progress = progress or ProgressReporter()
        limit = self.config.max_parallel_searches
        all_results: List[PlaceRecord] = []

        for i in range(0, len(tasks), limit):
            batch = tasks[i:i + limit]
            batch_percent = 15 + (i / len(tasks)) * 60
            progress(batch_percent, f"Processing batch {i // limit + 1}...")

            def on_page(task: SearchTask, page: int, collected: int, _pct=batch_percent):
                progress(_pct, f"Searching page {page} for \"{task.query}\"...")

            batch_results = await gather_batch(
                self.search_client.run(task, center, radius_meters, on_page=on_page) for task in batch
            )
            for results in batch_results:
                all_results.extend(results)

            if i + limit < len(tasks):
                await asyncio.sleep(self.config.batch_delay_ms / 1000)

        return all_results
