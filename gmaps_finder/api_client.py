"""
Places API Client

Thin wrapper around httpx.AsyncClient shared by geocoding, search and
detail lookups. Adds the API key and field-mask headers and retries
network-level failures with exponential backoff. HTTP error statuses are
returned to the caller untouched; each call site decides what they mean.
"""

import asyncio
import logging
from typing import Any, Dict, Optional

import httpx

from .config_manager import FinderConfig
from .exceptions import TransportError

logger = logging.getLogger(__name__)

AUTH_FAILURE_STATUSES = (401, 403)


class PlacesApiClient:
    """Async HTTP client for the Google Maps Platform endpoints.

    Args:
        config: Finder configuration (API key, timeout, retry policy).
        transport: Optional httpx transport, e.g. httpx.MockTransport in tests.
        http_client: Optional pre-built AsyncClient. Not closed by aclose().
    """

    def __init__(
        self,
        config: FinderConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.config = config
        self.api_key = config.require_api_key()
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            timeout=config.timeout_sec,
            transport=transport,
        )

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()
        return False

    async def aclose(self):
        if self._owns_client:
            await self._client.aclose()

    def _headers(self, field_mask: Optional[str]) -> Dict[str, str]:
        headers = {"X-Goog-Api-Key": self.api_key}
        if field_mask:
            headers["X-Goog-FieldMask"] = field_mask
        return headers

    def get_backoff_delay(self, attempt: int) -> float:
        """Get delay for retry attempt."""
        return self.config.retry_backoff_sec * (2 ** attempt)

    async def _send(self, method: str, url: str, **kwargs) -> httpx.Response:
        attempts = self.config.max_retries + 1
        for attempt in range(attempts):
            try:
                return await self._client.request(method, url, **kwargs)
            except httpx.TransportError as e:
                if attempt < attempts - 1:
                    delay = self.get_backoff_delay(attempt)
                    logger.warning(
                        "%s %s failed (%s); retrying in %.2fs (attempt %d/%d)",
                        method, url, type(e).__name__, delay, attempt + 1, attempts - 1,
                    )
                    await asyncio.sleep(delay)
                    continue
                raise TransportError(f"{method} {url} failed: {e}") from e

    async def post_json(self, url: str, body: Dict[str, Any], field_mask: Optional[str] = None) -> httpx.Response:
        """POST a JSON body to a Places API endpoint."""
        return await self._send("POST", url, json=body, headers=self._headers(field_mask))

    async def get(
        self,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        field_mask: Optional[str] = None,
        key_in_query: bool = False,
    ) -> httpx.Response:
        """
        GET an endpoint.

        The legacy web-service endpoints (geocoding) take the key as a query
        parameter; Places API v1 endpoints take it as a header.
        """
        params = dict(params or {})
        if key_in_query:
            params["key"] = self.api_key
            return await self._send("GET", url, params=params)
        return await self._send("GET", url, params=params, headers=self._headers(field_mask))
