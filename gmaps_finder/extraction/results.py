"""
Result Assembly

Deduplication, distance filtering, sorting and capping of place records,
the SearchResultSet container returned to callers, and the batch and
progress helpers shared by search and enrichment.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Optional, Sequence

from ..models import PlaceRecord

logger = logging.getLogger(__name__)

# on_progress(percent, status)
ProgressCallback = Callable[[float, str], None]


class ProgressReporter:
    """Wraps an optional progress callback; percent is clamped to 0..100."""

    def __init__(self, callback: Optional[ProgressCallback] = None):
        self.callback = callback
        self.last_percent = 0.0

    def __call__(self, percent: float, status: str):
        percent = max(0.0, min(100.0, float(percent)))
        self.last_percent = percent
        logger.debug("progress %.0f%%: %s", percent, status)
        if self.callback is not None:
            self.callback(percent, status)


async def gather_batch(awaitables: Iterable[Awaitable]) -> List[Any]:
    """
    Await a batch as a whole, then raise the first error (in batch order).

    Every sibling settles before anything propagates.
    """
    results = await asyncio.gather(*awaitables, return_exceptions=True)
    for result in results:
        if isinstance(result, BaseException):
            raise result
    return results


def remove_duplicates(records: Iterable[PlaceRecord]) -> List[PlaceRecord]:
    """Keep the first record seen for each place_id, preserving order."""
    seen = set()
    unique = []
    for record in records:
        if record.place_id in seen:
            continue
        seen.add(record.place_id)
        unique.append(record)
    return unique


def filter_by_distance(records: Iterable[PlaceRecord], radius_miles: float) -> List[PlaceRecord]:
    """Drop records farther than radius_miles from the search center."""
    return [r for r in records if r.distance_miles <= radius_miles]


def sort_by_distance(records: Iterable[PlaceRecord]) -> List[PlaceRecord]:
    """Nearest first; ties keep their original order (sorted() is stable)."""
    return sorted(records, key=lambda r: r.distance_miles)


def effective_limit(max_results: Optional[int], hard_cap: int) -> int:
    """Requested max bounded by the process-wide ceiling."""
    if max_results is None:
        return hard_cap
    return max(0, min(max_results, hard_cap))


class SearchResultSet:
    """Result object returned by searches.

    Ordered by distance, unique by place_id, no longer than the requested
    maximum.

    Attributes:
        places: List of PlaceRecord.
        metadata: Request info (location, keyword, radius, country, center).
        statistics: Counts collected along the pipeline.
    """

    def __init__(
        self,
        places: Sequence[PlaceRecord],
        metadata: Optional[Dict[str, Any]] = None,
        statistics: Optional[Dict[str, Any]] = None,
    ):
        self.places: List[PlaceRecord] = list(places)
        self.metadata: Dict[str, Any] = dict(metadata or {})
        self.statistics: Dict[str, Any] = dict(statistics or {})

    def __len__(self):
        return len(self.places)

    def __iter__(self):
        return iter(self.places)

    def __getitem__(self, index):
        return self.places[index]

    def to_dict(self) -> Dict[str, Any]:
        """Return the full result as a plain dictionary."""
        return {
            "metadata": self.metadata,
            "statistics": self.statistics,
            "places": [p.to_dict() for p in self.places],
        }

    def __repr__(self):
        keyword = self.metadata.get("keyword", "unknown")
        location = self.metadata.get("location", "unknown")
        return f"<SearchResultSet: {len(self.places)} places for '{keyword}' near '{location}'>"


def assemble_results(
    records: Sequence[PlaceRecord],
    radius_miles: float,
    max_results: Optional[int],
    hard_cap: int,
    metadata: Optional[Dict[str, Any]] = None,
) -> SearchResultSet:
    """
    Turn raw search output into a SearchResultSet.

    Steps: dedupe by place_id (first wins), keep records within
    radius_miles, sort by distance, truncate to the effective limit.
    """
    unique = remove_duplicates(records)
    within = filter_by_distance(unique, radius_miles)
    ordered = sort_by_distance(within)
    limit = effective_limit(max_results, hard_cap)
    places = ordered[:limit]

    statistics = {
        "total_raw": len(records),
        "unique": len(unique),
        "within_radius": len(within),
        "returned": len(places),
    }
    logger.info(
        "Fetched %d total results, %d unique, %d within radius, returning %d (limit %d)",
        len(records), len(unique), len(within), len(places), limit,
    )
    return SearchResultSet(places, metadata=metadata, statistics=statistics)
