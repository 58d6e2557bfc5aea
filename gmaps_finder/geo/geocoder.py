"""
Geocoding

Resolves a free-text location (city, ZIP, address) to coordinates using
the Google Geocoding API. No retries beyond the transport layer: a
location that does not resolve is reported immediately.
"""

import logging
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..api_client import PlacesApiClient
from ..config import GEOCODE_URL
from ..exceptions import AuthenticationError, LocationNotFound
from ..models import Coordinates

logger = logging.getLogger(__name__)


class _GeocodeLocation(BaseModel):
    model_config = ConfigDict(extra="ignore")
    lat: float
    lng: float


class _GeocodeGeometry(BaseModel):
    model_config = ConfigDict(extra="ignore")
    location: Optional[_GeocodeLocation] = None


class _GeocodeResult(BaseModel):
    model_config = ConfigDict(extra="ignore")
    formatted_address: Optional[str] = None
    geometry: Optional[_GeocodeGeometry] = None


class GeocodeResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")
    status: str = "UNKNOWN_ERROR"
    results: List[_GeocodeResult] = Field(default_factory=list)
    error_message: Optional[str] = None


class GeoLocator:
    """Resolves location text to Coordinates."""

    def __init__(self, client: PlacesApiClient, geocode_url: str = GEOCODE_URL):
        self.client = client
        self.geocode_url = geocode_url

    async def resolve(self, location: str, country: Optional[str] = None) -> Coordinates:
        """
        Geocode a location string.

        Args:
            location: Free text, e.g. "Plano, TX" or "75024"
            country: Optional ISO 3166-1 alpha-2 code to restrict results to

        Returns:
            Coordinates of the first match

        Raises:
            LocationNotFound: No match, or the provider returned a non-OK status
            AuthenticationError: The provider rejected the API key
            TransportError: The request failed at the network level
        """
        params = {"address": location}
        if country:
            params["components"] = f"country:{country.strip().upper()}"

        response = await self.client.get(self.geocode_url, params=params, key_in_query=True)
        if response.status_code != 200:
            logger.warning(
                "Geocoding failed for %r (country=%s): HTTP %d",
                location, country, response.status_code,
            )
            raise LocationNotFound(location, status=f"HTTP_{response.status_code}")

        try:
            data = GeocodeResponse.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            logger.warning("Unreadable geocoding response for %r: %s", location, e)
            raise LocationNotFound(location, status="INVALID_RESPONSE")

        if data.status == "REQUEST_DENIED":
            raise AuthenticationError(
                f"Geocoding request denied: {data.error_message or 'check your API key'}"
            )

        if data.status != "OK" or not data.results:
            logger.warning(
                "Geocoding failed for location: %r, country: %s, status: %s",
                location, country, data.status,
            )
            raise LocationNotFound(location, status=data.status)

        geometry = data.results[0].geometry
        if geometry is None or geometry.location is None:
            raise LocationNotFound(location, status="NO_GEOMETRY")

        coords = Coordinates(lat=geometry.location.lat, lng=geometry.location.lng)
        logger.debug("Geocoded %r -> %.5f, %.5f", location, coords.lat, coords.lng)
        return coords
