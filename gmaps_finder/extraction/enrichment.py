"""
Business Enrichment

Fetches per-place details (phone, website, hours, rating, ...) and merges
them into search results without discarding data the search already had.
"""

import asyncio
import logging
from typing import List, Optional, Sequence

from pydantic import ValidationError

from ..api_client import AUTH_FAILURE_STATUSES, PlacesApiClient
from ..config import DETAILS_FIELD_MASK, PLACE_DETAILS_URL
from ..config_manager import FinderConfig
from ..exceptions import AuthenticationError, DetailFetchError, TransportError
from ..models import PlaceDetails, PlaceRecord
from ..parsers import PlaceEntry, parse_details
from .results import ProgressCallback, ProgressReporter, gather_batch

logger = logging.getLogger(__name__)

# PlaceRecord attribute <- PlaceDetails attribute
_MERGE_FIELDS = (
    "phone",
    "website",
    "hours",
    "rating",
    "rating_count",
    "categories",
    "price_level",
    "status",
    "primary_category",
)


def _has_value(value) -> bool:
    if value is None:
        return False
    if isinstance(value, (str, list, tuple, dict)) and len(value) == 0:
        return False
    return True


def merge_details(record: PlaceRecord, details: PlaceDetails) -> PlaceRecord:
    """
    Merge details into a record in place, fill-if-better.

    A detail value replaces the record's value only when it is non-null
    and non-empty; otherwise the record keeps what it had.
    """
    for name in _MERGE_FIELDS:
        value = getattr(details, name)
        if _has_value(value):
            setattr(record, name, list(value) if isinstance(value, list) else value)
    return record


class DetailEnricher:
    """Enriches search results with Place Details lookups."""

    def __init__(self, client: PlacesApiClient, config: FinderConfig):
        self.client = client
        self.config = config

    async def fetch_details(self, place_id: str) -> PlaceDetails:
        """
        Get additional details for a place.

        Raises:
            AuthenticationError: The API key was rejected (401/403)
            DetailFetchError: Any other failure, network errors included
        """
        url = PLACE_DETAILS_URL.format(place_id=place_id)
        try:
            response = await self.client.get(url, field_mask=DETAILS_FIELD_MASK)
        except TransportError as e:
            raise DetailFetchError(place_id, str(e)) from e

        if response.status_code in AUTH_FAILURE_STATUSES:
            raise AuthenticationError(
                f"Places API rejected the details request ({response.status_code}): {response.text[:200]}"
            )
        if not response.is_success:
            raise DetailFetchError(place_id, f"HTTP {response.status_code} - {response.text}")

        try:
            entry = PlaceEntry.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise DetailFetchError(place_id, f"invalid response: {e}") from e
        return parse_details(entry)

    async def enrich_one(self, record: PlaceRecord) -> PlaceRecord:
        """Enrich a single record; failures leave it unchanged."""
        try:
            details = await self.fetch_details(record.place_id)
        except DetailFetchError as e:
            logger.warning("Failed to get details for %s: %s", record.name, e)
            return record
        return merge_details(record, details)

    async def enrich(
        self,
        records: Sequence[PlaceRecord],
        on_progress: Optional[ProgressCallback] = None,
    ) -> List[PlaceRecord]:
        """
        Enrich up to max_detailed_results records in concurrent batches.

        Records past the cap are appended unchanged after the enriched
        prefix. Progress runs from 95 to 100.

        Args:
            records: Search results, typically nearest first
            on_progress: Callback receiving (percent, status)

        Returns:
            Enriched prefix followed by the untouched remainder
        """
        records = list(records)
        if not records:
            return records

        progress = ProgressReporter(on_progress)
        cap = min(len(records), self.config.max_detailed_results)
        to_process = records[:cap]
        batch_size = self.config.detail_batch_size

        progress(95, f"Fetching additional details for {len(to_process)} results...")

        detailed: List[PlaceRecord] = []
        for i in range(0, len(to_process), batch_size):
            batch = to_process[i:i + batch_size]
            detailed.extend(await gather_batch(self.enrich_one(r) for r in batch))

            done = min(i + batch_size, len(to_process))
            progress(95 + (done / len(to_process)) * 5, f"Processed {done} of {len(to_process)}")

            if i + batch_size < len(to_process):
                await asyncio.sleep(self.config.detail_batch_delay_ms / 1000)

        detailed.extend(records[cap:])
        logger.info("Enriched %d of %d results", cap, len(records))
        return detailed
