"""
Data records shared across the search pipeline.

- Coordinates: resolved search center
- SearchTask: one query to run against the place-search service
- PlaceRecord: one normalized business
- PlaceDetails: the fields a detail lookup can contribute
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from .config import MAPS_PLACE_URL


@dataclass(frozen=True)
class Coordinates:
    """A latitude/longitude pair"""
    lat: float
    lng: float


class SearchKind(Enum):
    NEARBY = "nearby"
    TEXT = "text"


@dataclass
class SearchTask:
    """A single search query. Lower priority values run first."""
    kind: SearchKind
    query: str
    priority: int = 1


@dataclass
class HoursEntry:
    """One line of a weekly schedule, e.g. day='Monday', text='9:00 AM – 5:00 PM'"""
    day: str
    text: Optional[str] = None

    def to_dict(self) -> Dict[str, Optional[str]]:
        return {"day": self.day, "text": self.text}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class PlaceRecord:
    """A business returned by the place-search service.

    `place_id` is the natural key: two records with the same id are the
    same real-world place.
    """
    place_id: str
    name: str
    address: str
    location: Coordinates
    distance_miles: float
    rating: Optional[float] = None
    rating_count: int = 0
    categories: List[str] = field(default_factory=list)
    primary_category: Optional[str] = None
    price_level: Optional[int] = None
    status: Optional[str] = None
    phone: Optional[str] = None
    website: Optional[str] = None
    hours: Optional[List[HoursEntry]] = None
    fetched_at: datetime = field(default_factory=_utcnow)

    @property
    def maps_url(self) -> str:
        return MAPS_PLACE_URL.format(place_id=self.place_id)

    def to_dict(self) -> Dict[str, Any]:
        """Flat, JSON-serializable representation (see OUTPUT_SCHEMA)."""
        return {
            "place_id": self.place_id,
            "name": self.name,
            "address": self.address,
            "latitude": self.location.lat,
            "longitude": self.location.lng,
            "rating": self.rating,
            "rating_count": self.rating_count,
            "categories": list(self.categories),
            "primary_category": self.primary_category,
            "price_level": self.price_level,
            "status": self.status,
            "distance_miles": self.distance_miles,
            "phone": self.phone,
            "website": self.website,
            "hours": [h.to_dict() for h in self.hours] if self.hours is not None else None,
            "fetched_at": self.fetched_at.isoformat(),
            "maps_url": self.maps_url,
        }


@dataclass
class PlaceDetails:
    """Result of a detail lookup. Every field may be empty."""
    phone: Optional[str] = None
    website: Optional[str] = None
    hours: Optional[List[HoursEntry]] = None
    rating: Optional[float] = None
    rating_count: Optional[int] = None
    categories: List[str] = field(default_factory=list)
    primary_category: Optional[str] = None
    price_level: Optional[int] = None
    status: Optional[str] = None
    address: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "phone": self.phone,
            "website": self.website,
            "hours": [h.to_dict() for h in self.hours] if self.hours is not None else None,
            "rating": self.rating,
            "rating_count": self.rating_count,
            "categories": list(self.categories),
            "primary_category": self.primary_category,
            "price_level": self.price_level,
            "status": self.status,
            "address": self.address,
        }
