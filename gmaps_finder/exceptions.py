"""Custom exceptions for the gmaps-finder library."""

from typing import Optional


class FinderError(Exception):
    """Base exception for all gmaps-finder errors."""
    pass


class LocationNotFound(FinderError):
    """Raised when geocoding yields no coordinates for the requested location."""

    def __init__(self, location: str, status: str = "ZERO_RESULTS"):
        self.location = location
        self.status = status
        super().__init__(
            f"Could not find coordinates for the provided location: "
            f"{location!r} (status={status})"
        )


class ProviderPageError(FinderError):
    """Raised when a single search page request fails."""

    def __init__(self, query: str, page: int, status_code: Optional[int] = None, detail: str = ""):
        self.query = query
        self.page = page
        self.status_code = status_code
        message = f"Search failed for {query!r} (page {page})"
        if status_code is not None:
            message += f": HTTP {status_code}"
        if detail:
            message += f" - {detail[:200]}"
        super().__init__(message)


class DetailFetchError(FinderError):
    """Raised when a single place detail lookup fails."""

    def __init__(self, place_id: str, detail: str = ""):
        self.place_id = place_id
        message = f"Failed to get place details for {place_id}"
        if detail:
            message += f": {detail[:200]}"
        super().__init__(message)


class TransportError(FinderError):
    """Raised when a request fails at the network level after all retries."""
    pass


class ConfigurationError(FinderError):
    """Raised when configuration is invalid or incomplete."""
    pass


class AuthenticationError(FinderError):
    """Raised when the API key is rejected by the provider."""
    pass
