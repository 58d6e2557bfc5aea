"""
Default configuration for the Google Maps Business Finder.

Module-level constants only: endpoints, field masks, search tables and
output layout. Runtime settings (API key, limits, delays) live on
FinderConfig in config_manager.py and are passed to each component.
"""

# Google endpoints
GEOCODE_URL = "https://maps.googleapis.com/maps/api/geocode/json"
PLACES_BASE_URL = "https://places.googleapis.com/v1"
TEXT_SEARCH_URL = f"{PLACES_BASE_URL}/places:searchText"
NEARBY_SEARCH_URL = f"{PLACES_BASE_URL}/places:searchNearby"
PLACE_DETAILS_URL = f"{PLACES_BASE_URL}/places/{{place_id}}"
MAPS_PLACE_URL = "https://www.google.com/maps/place/?q=place_id:{place_id}"

# Response shaping (X-Goog-FieldMask)
_PLACE_FIELDS = (
    "id",
    "displayName",
    "formattedAddress",
    "location",
    "rating",
    "userRatingCount",
    "types",
    "nationalPhoneNumber",
    "websiteUri",
    "regularOpeningHours",
    "priceLevel",
    "businessStatus",
    "primaryType",
    "primaryTypeDisplayName",
)
SEARCH_FIELD_MASK = ",".join(f"places.{f}" for f in _PLACE_FIELDS) + ",nextPageToken"
DETAILS_FIELD_MASK = ",".join(f for f in _PLACE_FIELDS if f not in ("id", "location"))

# Provider limits
RESULTS_PER_PAGE = 20          # maxResultCount allowed by the Places API
MAX_PROVIDER_RADIUS_M = 50000  # hard cap on circle radius

# Unit conversions
METERS_PER_MILE = 1609.34
KM_PER_MILE = 1.60934
MILES_PER_KM = 0.621371
EARTH_RADIUS_MILES = 3959

# Runtime defaults (overridable through FinderConfig / environment)
DEFAULT_MAX_RESULTS = 10000
DEFAULT_MAX_DETAILED_RESULTS = 1000
DEFAULT_REQUEST_DELAY_MS = 100
DEFAULT_MAX_RADIUS_MILES = 31
DEFAULT_MAX_PAGES_PER_SEARCH = 500
DEFAULT_MAX_PARALLEL_SEARCHES = 4
DEFAULT_BATCH_DELAY_MS = 100
DEFAULT_DETAIL_BATCH_SIZE = 5
DEFAULT_DETAIL_BATCH_DELAY_MS = 100
DEFAULT_TIMEOUT_SEC = 30.0
DEFAULT_MAX_RETRIES = 2
DEFAULT_RETRY_BACKOFF_SEC = 0.5
DEFAULT_SEARCH_MAX_RESULTS = 200

# Category search: place types for Nearby Search
BUSINESS_TYPES = {
    "repair": ["car_repair"],
    "collision": ["car_dealer"],  # many collision shops are listed as dealers
    "both": ["car_repair", "car_dealer"],
}

# Category search: keyword synonyms for Text Search
SEARCH_KEYWORDS = {
    "repair": ["auto repair", "mechanic", "auto service"],
    "collision": ["collision repair", "auto body", "body shop"],
    "both": ["auto repair", "collision repair", "mechanic", "auto body"],
}

# Places API priceLevel enum
PRICE_LEVELS = {
    "PRICE_LEVEL_FREE": 0,
    "PRICE_LEVEL_INEXPENSIVE": 1,
    "PRICE_LEVEL_MODERATE": 2,
    "PRICE_LEVEL_EXPENSIVE": 3,
    "PRICE_LEVEL_VERY_EXPENSIVE": 4,
}

# Output Schema
OUTPUT_SCHEMA = {
    "place_id": "string",
    "name": "string",
    "address": "string",
    "latitude": "float",
    "longitude": "float",
    "rating": "float",
    "rating_count": "integer",
    "categories": "list[string]",
    "primary_category": "string",
    "price_level": "integer",
    "status": "string",
    "distance_miles": "float",
    "phone": "string",
    "website": "string",
    "hours": "list[dict]",
    "fetched_at": "string",
}

# CSV Output Columns
CSV_COLUMNS = [
    "Business Name",
    "Address",
    "Phone Number",
    "Website",
    "Rating",
    "Review Count",
    "Price Level",
    "Business Type",
    "Hours",
    "Search Date/Time",
    "Location Searched",
    "Country",
    "Distance (miles)",
    "Google Maps URL",
]
