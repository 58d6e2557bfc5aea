"""
Search Execution

Runs a single search task against the Places API, following
nextPageToken until the provider stops returning one, a page fails, or
the page cap is reached.
"""

import asyncio
import logging
from typing import Any, Callable, Dict, List, Optional

from pydantic import ValidationError

from ..api_client import AUTH_FAILURE_STATUSES, PlacesApiClient
from ..config import NEARBY_SEARCH_URL, RESULTS_PER_PAGE, SEARCH_FIELD_MASK, TEXT_SEARCH_URL
from ..config_manager import FinderConfig
from ..exceptions import AuthenticationError, ProviderPageError, TransportError
from ..models import Coordinates, PlaceRecord, SearchKind, SearchTask
from ..parsers import SearchPage, normalize_place

logger = logging.getLogger(__name__)

# on_page(task, page_number, records_so_far)
PageCallback = Callable[[SearchTask, int, int], None]


def build_search_body(
    task: SearchTask,
    center: Coordinates,
    radius_meters: int,
    page_token: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Build the request body for one page of a search.

    Nearby searches restrict to the circle; text searches only bias
    toward it, which is why results are re-filtered by true distance.
    """
    circle = {
        "circle": {
            "center": {"latitude": center.lat, "longitude": center.lng},
            "radius": radius_meters,
        }
    }

    if task.kind is SearchKind.NEARBY:
        body = {
            "includedTypes": [task.query],
            "maxResultCount": RESULTS_PER_PAGE,
            "locationRestriction": circle,
        }
    else:
        body = {
            "textQuery": task.query,
            "maxResultCount": RESULTS_PER_PAGE,
            "locationBias": circle,
        }

    if page_token:
        body["pageToken"] = page_token
    return body


class PlaceSearchClient:
    """Executes paginated place searches."""

    def __init__(self, client: PlacesApiClient, config: FinderConfig):
        self.client = client
        self.config = config

    def _url_for(self, task: SearchTask) -> str:
        return NEARBY_SEARCH_URL if task.kind is SearchKind.NEARBY else TEXT_SEARCH_URL

    async def fetch_page(
        self,
        task: SearchTask,
        center: Coordinates,
        radius_meters: int,
        page: int,
        page_token: Optional[str] = None,
    ) -> SearchPage:
        """
        Fetch and validate one page.

        Raises:
            AuthenticationError: The API key was rejected (401/403)
            ProviderPageError: Any other non-success response or bad payload
            TransportError: Network failure after retries
        """
        body = build_search_body(task, center, radius_meters, page_token)
        response = await self.client.post_json(self._url_for(task), body, field_mask=SEARCH_FIELD_MASK)

        if response.status_code in AUTH_FAILURE_STATUSES:
            raise AuthenticationError(
                f"Places API rejected the request ({response.status_code}): {response.text[:200]}"
            )
        if not response.is_success:
            raise ProviderPageError(task.query, page, response.status_code, response.text)

        try:
            return SearchPage.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise ProviderPageError(task.query, page, response.status_code, f"invalid response: {e}")

    async def run(
        self,
        task: SearchTask,
        center: Coordinates,
        radius_meters: int,
        on_page: Optional[PageCallback] = None,
    ) -> List[PlaceRecord]:
        """
        Execute a search task across all of its pages.

        A failed page ends pagination for this task but keeps what was
        already collected. Only authentication failures propagate.

        Args:
            task: What to search for
            center: Search center
            radius_meters: Circle radius (already clamped)
            on_page: Called before each page request

        Returns:
            Normalized records in provider order
        """
        all_results: List[PlaceRecord] = []
        page_token = None
        max_pages = self.config.max_pages_per_search
        page = 0

        for page in range(1, max_pages + 1):
            if on_page is not None:
                on_page(task, page, len(all_results))

            try:
                data = await self.fetch_page(task, center, radius_meters, page, page_token)
            except (ProviderPageError, TransportError) as e:
                logger.warning("%s search stopped: %s", task.kind.value, e)
                break

            for entry in data.places:
                record = normalize_place(entry, center)
                if record is not None:
                    all_results.append(record)

            logger.debug(
                "%s search %r page %d: %d places (total %d)",
                task.kind.value, task.query, page, len(data.places), len(all_results),
            )

            if not data.next_page_token:
                break
            if page == max_pages:
                logger.warning(
                    "%s search %r hit the page cap (%d pages)", task.kind.value, task.query, max_pages
                )
                break

            page_token = data.next_page_token
            await asyncio.sleep(self.config.request_delay_ms / 1000)

        logger.info(
            "%s search %r: fetched %d results from %d pages (max pages: %d)",
            task.kind.value, task.query, len(all_results), page, max_pages,
        )
        return all_results
