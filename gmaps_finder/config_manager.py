"""
Configuration manager.

FinderConfig is built once (from arguments and/or environment variables)
and handed to every component constructor. Nothing reads module globals
at call time.
"""

import os
from dataclasses import dataclass, field, fields, replace
from typing import Dict, List, Optional

from . import config
from .exceptions import ConfigurationError


# env var name -> FinderConfig field
_ENV_FIELDS = {
    "MAX_RESULTS": "max_results",
    "MAX_DETAILED_RESULTS": "max_detailed_results",
    "REQUEST_DELAY": "request_delay_ms",
    "MAX_RADIUS": "max_radius_miles",
    "MAX_PAGES_PER_SEARCH": "max_pages_per_search",
    "MAX_PARALLEL_SEARCHES": "max_parallel_searches",
    "BATCH_DELAY": "batch_delay_ms",
    "DETAIL_BATCH_SIZE": "detail_batch_size",
    "DETAIL_BATCH_DELAY": "detail_batch_delay_ms",
    "REQUEST_TIMEOUT": "timeout_sec",
    "MAX_RETRIES": "max_retries",
    "RETRY_BACKOFF": "retry_backoff_sec",
}


@dataclass
class FinderConfig:
    """Configuration for BusinessFinder and its components.

    Args:
        api_key: Google Maps Platform key. Falls back to GOOGLE_MAPS_API_KEY.
        max_results: Process-wide ceiling on returned places.
        max_detailed_results: How many places get a detail lookup.
        request_delay_ms: Pause between pagination requests.
        max_radius_miles: Largest radius accepted from users.
        max_pages_per_search: Safety bound on pages per search task.
        max_parallel_searches: Search tasks run concurrently per batch.
        batch_delay_ms: Pause between search batches.
        detail_batch_size: Detail lookups run concurrently per batch.
        detail_batch_delay_ms: Pause between detail batches.
        timeout_sec: HTTP timeout.
        max_retries: Retries for network-level failures (not HTTP errors).
        retry_backoff_sec: Base delay for exponential retry backoff.
        business_types: Category name -> place types (Nearby Search).
        search_keywords: Category name -> keyword synonyms (Text Search).
        verbose: Whether the CLI prints progress output.
    """

    api_key: Optional[str] = None
    max_results: int = config.DEFAULT_MAX_RESULTS
    max_detailed_results: int = config.DEFAULT_MAX_DETAILED_RESULTS
    request_delay_ms: int = config.DEFAULT_REQUEST_DELAY_MS
    max_radius_miles: int = config.DEFAULT_MAX_RADIUS_MILES
    max_pages_per_search: int = config.DEFAULT_MAX_PAGES_PER_SEARCH
    max_parallel_searches: int = config.DEFAULT_MAX_PARALLEL_SEARCHES
    batch_delay_ms: int = config.DEFAULT_BATCH_DELAY_MS
    detail_batch_size: int = config.DEFAULT_DETAIL_BATCH_SIZE
    detail_batch_delay_ms: int = config.DEFAULT_DETAIL_BATCH_DELAY_MS
    timeout_sec: float = config.DEFAULT_TIMEOUT_SEC
    max_retries: int = config.DEFAULT_MAX_RETRIES
    retry_backoff_sec: float = config.DEFAULT_RETRY_BACKOFF_SEC
    business_types: Dict[str, List[str]] = field(
        default_factory=lambda: {k: list(v) for k, v in config.BUSINESS_TYPES.items()}
    )
    search_keywords: Dict[str, List[str]] = field(
        default_factory=lambda: {k: list(v) for k, v in config.SEARCH_KEYWORDS.items()}
    )
    verbose: bool = True

    def __post_init__(self):
        """Resolve the API key from the environment if not explicitly set."""
        if self.api_key is None:
            key = os.environ.get("GOOGLE_MAPS_API_KEY", "").strip()
            self.api_key = key or None

        if self.max_parallel_searches < 1:
            raise ConfigurationError("max_parallel_searches must be at least 1")
        if self.detail_batch_size < 1:
            raise ConfigurationError("detail_batch_size must be at least 1")
        if self.max_pages_per_search < 1:
            raise ConfigurationError("max_pages_per_search must be at least 1")
        if self.max_retries < 0:
            raise ConfigurationError("max_retries cannot be negative")

    @classmethod
    def from_env(cls, environ: Optional[Dict[str, str]] = None, **overrides) -> "FinderConfig":
        """Build a config from environment variables, then apply overrides."""
        env = os.environ if environ is None else environ
        types = {f.name: f.type for f in fields(cls)}
        values = {}

        key = env.get("GOOGLE_MAPS_API_KEY", "").strip()
        if key:
            values["api_key"] = key

        for env_name, attr in _ENV_FIELDS.items():
            raw = env.get(env_name)
            if raw is None or not raw.strip():
                continue
            cast = float if types[attr] in (float, "float") else int
            try:
                values[attr] = cast(raw.strip())
            except ValueError:
                raise ConfigurationError(
                    f"Invalid value for {env_name}: {raw!r} (expected {cast.__name__})"
                )

        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)

    def require_api_key(self) -> str:
        """Return the API key or raise a ConfigurationError explaining how to set it."""
        if not self.api_key:
            raise ConfigurationError(
                "Missing GOOGLE_MAPS_API_KEY.\n"
                "Set it in the environment or pass api_key to FinderConfig.\n"
                "Example: export GOOGLE_MAPS_API_KEY='YOUR_KEY'"
            )
        return self.api_key

    def with_overrides(self, **overrides) -> "FinderConfig":
        """Copy of this config with the given non-None fields replaced."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})

    @property
    def max_radius_km(self) -> int:
        return round(self.max_radius_miles * config.KM_PER_MILE)
