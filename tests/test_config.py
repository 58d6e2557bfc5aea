import pytest

from gmaps_finder.config_manager import FinderConfig
from gmaps_finder.exceptions import ConfigurationError


def test_defaults(monkeypatch):
    monkeypatch.delenv("GOOGLE_MAPS_API_KEY", raising=False)
    config = FinderConfig()
    assert config.api_key is None
    assert config.max_results == 10000
    assert config.max_detailed_results == 1000
    assert config.request_delay_ms == 100
    assert config.max_radius_miles == 31
    assert config.max_pages_per_search == 500
    assert config.max_parallel_searches == 4
    assert config.max_radius_km == 50


def test_api_key_from_environment(monkeypatch):
    monkeypatch.setenv("GOOGLE_MAPS_API_KEY", " env-key ")
    assert FinderConfig().api_key == "env-key"


def test_require_api_key_missing(monkeypatch):
    monkeypatch.delenv("GOOGLE_MAPS_API_KEY", raising=False)
    with pytest.raises(ConfigurationError, match="GOOGLE_MAPS_API_KEY"):
        FinderConfig().require_api_key()


def test_from_env_reads_and_casts():
    config = FinderConfig.from_env({
        "GOOGLE_MAPS_API_KEY": "k",
        "MAX_RESULTS": "500",
        "MAX_DETAILED_RESULTS": "20",
        "REQUEST_DELAY": "0",
        "REQUEST_TIMEOUT": "12.5",
        "MAX_PARALLEL_SEARCHES": "2",
    })
    assert config.api_key == "k"
    assert config.max_results == 500
    assert config.max_detailed_results == 20
    assert config.request_delay_ms == 0
    assert config.timeout_sec == 12.5
    assert config.max_parallel_searches == 2


def test_from_env_overrides_win():
    config = FinderConfig.from_env({"GOOGLE_MAPS_API_KEY": "k", "MAX_RESULTS": "500"}, max_results=7, verbose=None)
    assert config.max_results == 7
    assert config.verbose is True


def test_from_env_bad_value():
    with pytest.raises(ConfigurationError, match="MAX_RESULTS"):
        FinderConfig.from_env({"GOOGLE_MAPS_API_KEY": "k", "MAX_RESULTS": "lots"})


def test_invalid_concurrency():
    with pytest.raises(ConfigurationError):
        FinderConfig(api_key="k", max_parallel_searches=0)


def test_with_overrides_copies():
    base = FinderConfig(api_key="k")
    other = base.with_overrides(max_results=5, api_key=None)
    assert other.max_results == 5
    assert other.api_key == "k"
    assert base.max_results == 10000


def test_category_tables_are_copied():
    a = FinderConfig(api_key="k")
    a.search_keywords["repair"].append("tire shop")
    b = FinderConfig(api_key="k")
    assert "tire shop" not in b.search_keywords["repair"]
