import asyncio
import json
from typing import Dict, List, Optional

import httpx
import pytest

from gmaps_finder.config_manager import FinderConfig

CENTER_LAT = 33.0198
CENTER_LNG = -96.6989


def make_place(
    place_id: str,
    lat: float = CENTER_LAT,
    lng: float = CENTER_LNG,
    name: Optional[str] = None,
    **extra,
) -> Dict:
    """Raw Places API place entry."""
    place = {
        "id": place_id,
        "displayName": {"text": name or f"Place {place_id}", "languageCode": "en"},
        "formattedAddress": f"{place_id} Main St, Plano, TX",
        "location": {"latitude": lat, "longitude": lng},
        "types": ["restaurant", "food"],
    }
    place.update(extra)
    return place


def geocode_ok(lat: float = CENTER_LAT, lng: float = CENTER_LNG) -> Dict:
    return {
        "status": "OK",
        "results": [{
            "formatted_address": "Plano, TX, USA",
            "geometry": {"location": {"lat": lat, "lng": lng}},
        }],
    }


class FakeGoogle:
    """In-memory stand-in for the Geocoding and Places endpoints.

    pages maps a search query (textQuery or the single includedTypes entry)
    to a list of pages; each page is a list of raw place entries. Every page
    but the last carries a nextPageToken.
    """

    def __init__(self):
        self.geocode = geocode_ok()
        self.geocode_status_code = 200
        self.pages: Dict[str, List[List[Dict]]] = {}
        self.page_errors: Dict[tuple, int] = {}
        self.endless_queries = set()
        self.details: Dict[str, Dict] = {}
        self.detail_errors: Dict[str, int] = {}
        self.search_status_code: Optional[int] = None
        self.requests: List[httpx.Request] = []

    @property
    def search_requests(self) -> List[Dict]:
        return [
            json.loads(r.content)
            for r in self.requests
            if r.method == "POST" and r.url.path.startswith("/v1/places:")
        ]

    @property
    def detail_ids(self) -> List[str]:
        return [
            r.url.path.rsplit("/", 1)[-1]
            for r in self.requests
            if r.method == "GET" and r.url.path.startswith("/v1/places/")
        ]

    def _search(self, request: httpx.Request) -> httpx.Response:
        if self.search_status_code is not None:
            return httpx.Response(self.search_status_code, json={"error": {"message": "denied"}})

        body = json.loads(request.content)
        query = body.get("textQuery") or body["includedTypes"][0]
        token = body.get("pageToken")
        index = int(token.split("|")[1]) if token else 0

        if (query, index + 1) in self.page_errors:
            return httpx.Response(self.page_errors[(query, index + 1)], text="backend error")

        if query in self.endless_queries:
            places = [make_place(f"{query}-{index}")]
            return httpx.Response(200, json={"places": places, "nextPageToken": f"{query}|{index + 1}"})

        pages = self.pages.get(query, [])
        if index >= len(pages):
            return httpx.Response(200, json={})

        data = {"places": pages[index]}
        if index + 1 < len(pages):
            data["nextPageToken"] = f"{query}|{index + 1}"
        return httpx.Response(200, json=data)

    def _details(self, request: httpx.Request) -> httpx.Response:
        place_id = request.url.path.rsplit("/", 1)[-1]
        if place_id in self.detail_errors:
            return httpx.Response(self.detail_errors[place_id], text="not found")
        return httpx.Response(200, json=self.details.get(place_id, {}))

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if path.endswith("/geocode/json"):
            return httpx.Response(self.geocode_status_code, json=self.geocode)
        if request.method == "POST" and path.startswith("/v1/places:"):
            return self._search(request)
        if request.method == "GET" and path.startswith("/v1/places/"):
            return self._details(request)
        return httpx.Response(404)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


class SlowGoogle:
    """Async wrapper around FakeGoogle that holds each request open for `delay`
    seconds and records how many were in flight at once."""

    def __init__(self, fake: FakeGoogle, delay: float = 0.02, slow_paths=("/v1/places",)):
        self.fake = fake
        self.delay = delay
        self.slow_paths = slow_paths
        self.in_flight = 0
        self.peak = 0
        self.completed: List[httpx.Request] = []

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        response = self.fake(request)
        if not request.url.path.startswith(self.slow_paths) or response.status_code in (401, 403):
            return response
        self.in_flight += 1
        self.peak = max(self.peak, self.in_flight)
        try:
            await asyncio.sleep(self.delay)
        finally:
            self.in_flight -= 1
        self.completed.append(request)
        return response

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


@pytest.fixture
def fake_google():
    return FakeGoogle()


@pytest.fixture
def config():
    return FinderConfig(
        api_key="test-key",
        request_delay_ms=0,
        batch_delay_ms=0,
        detail_batch_delay_ms=0,
        retry_backoff_sec=0,
    )
