"""
Places API Response Parsing

Pydantic models for Places API (New) responses, plus
the normalization of raw place entries into PlaceRecord / PlaceDetails.

Every optional field the provider may omit is Optional with a default, so
validation only fails on structurally wrong payloads (e.g. a string where
an object is expected).
"""

import logging
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from ..config import PRICE_LEVELS
from ..geo.distance import haversine_miles
from ..models import Coordinates, HoursEntry, PlaceDetails, PlaceRecord

logger = logging.getLogger(__name__)

UNKNOWN_NAME = "Unknown"
NO_ADDRESS = "No address available"


class _ApiModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class LocalizedText(_ApiModel):
    text: Optional[str] = None
    language_code: Optional[str] = Field(default=None, alias="languageCode")


class LatLng(_ApiModel):
    latitude: Optional[float] = None
    longitude: Optional[float] = None


class OpeningHours(_ApiModel):
    open_now: Optional[bool] = Field(default=None, alias="openNow")
    weekday_descriptions: Optional[List[str]] = Field(default=None, alias="weekdayDescriptions")


class PlaceEntry(_ApiModel):
    """A place as returned by searchText / searchNearby / places/{id}"""
    id: Optional[str] = None
    display_name: Optional[LocalizedText] = Field(default=None, alias="displayName")
    formatted_address: Optional[str] = Field(default=None, alias="formattedAddress")
    location: Optional[LatLng] = None
    rating: Optional[float] = None
    user_rating_count: Optional[int] = Field(default=None, alias="userRatingCount")
    types: Optional[List[str]] = None
    national_phone_number: Optional[str] = Field(default=None, alias="nationalPhoneNumber")
    website_uri: Optional[str] = Field(default=None, alias="websiteUri")
    regular_opening_hours: Optional[OpeningHours] = Field(default=None, alias="regularOpeningHours")
    price_level: Optional[Union[int, str]] = Field(default=None, alias="priceLevel")
    business_status: Optional[str] = Field(default=None, alias="businessStatus")
    primary_type: Optional[str] = Field(default=None, alias="primaryType")
    primary_type_display_name: Optional[LocalizedText] = Field(default=None, alias="primaryTypeDisplayName")


class SearchPage(_ApiModel):
    places: List[PlaceEntry] = Field(default_factory=list)
    next_page_token: Optional[str] = Field(default=None, alias="nextPageToken")


def parse_price_level(value: Optional[Union[int, str]]) -> Optional[int]:
    """Map the priceLevel enum (or a legacy 0-4 integer) to an int."""
    if value is None:
        return None
    if isinstance(value, int):
        return value if 0 <= value <= 4 else None
    return PRICE_LEVELS.get(value)


def parse_hours(hours: Optional[OpeningHours]) -> Optional[List[HoursEntry]]:
    """Split 'Monday: 9:00 AM – 5:00 PM' lines into HoursEntry items."""
    if hours is None or not hours.weekday_descriptions:
        return None
    entries = []
    for description in hours.weekday_descriptions:
        day, sep, text = description.partition(": ")
        entries.append(HoursEntry(day=day, text=text if sep else None))
    return entries


def _primary_category(entry: PlaceEntry) -> Optional[str]:
    if entry.primary_type_display_name and entry.primary_type_display_name.text:
        return entry.primary_type_display_name.text
    return entry.primary_type or None


def normalize_place(entry: PlaceEntry, center: Coordinates) -> Optional[PlaceRecord]:
    """
    Convert a raw place entry into a PlaceRecord.

    Args:
        entry: Validated place entry from a search page
        center: Search center used for the distance

    Returns:
        PlaceRecord, or None if the entry has no id or no coordinates
    """
    loc = entry.location
    if not entry.id or loc is None or loc.latitude is None or loc.longitude is None:
        logger.debug("Skipping place without id or location: %r", entry.id)
        return None

    name = entry.display_name.text if entry.display_name and entry.display_name.text else None

    return PlaceRecord(
        place_id=entry.id,
        name=name or UNKNOWN_NAME,
        address=entry.formatted_address or NO_ADDRESS,
        location=Coordinates(lat=loc.latitude, lng=loc.longitude),
        distance_miles=haversine_miles(center.lat, center.lng, loc.latitude, loc.longitude),
        rating=entry.rating,
        rating_count=entry.user_rating_count or 0,
        categories=list(entry.types or []),
        primary_category=_primary_category(entry),
        price_level=parse_price_level(entry.price_level),
        status=entry.business_status or None,
        phone=entry.national_phone_number or None,
        website=entry.website_uri or None,
        hours=parse_hours(entry.regular_opening_hours),
    )


def parse_details(entry: PlaceEntry) -> PlaceDetails:
    """Convert a places/{id} response into PlaceDetails."""
    return PlaceDetails(
        phone=entry.national_phone_number or None,
        website=entry.website_uri or None,
        hours=parse_hours(entry.regular_opening_hours),
        rating=entry.rating,
        rating_count=entry.user_rating_count or None,
        categories=list(entry.types or []),
        primary_category=_primary_category(entry),
        price_level=parse_price_level(entry.price_level),
        status=entry.business_status or None,
        address=entry.formatted_address or None,
    )
