import asyncio
import json

import pytest

from gmaps_finder import BusinessFinder
from gmaps_finder.exceptions import AuthenticationError, LocationNotFound
from gmaps_finder.extraction.collector import build_category_tasks, build_keyword_tasks
from gmaps_finder.models import SearchKind

from .conftest import CENTER_LAT, CENTER_LNG, SlowGoogle, make_place

# ~0.069 miles per 0.001 degree of latitude
MILE = 1 / 69.09


def _place_at(place_id, miles):
    return make_place(place_id, lat=CENTER_LAT + miles * MILE, lng=CENTER_LNG)


def _search(fake_google, config, *args, category=False, **kwargs):
    progress = []

    async def run():
        async with BusinessFinder(config, transport=fake_google.transport) as finder:
            method = finder.search_category if category else finder.search
            return await method(*args, on_progress=lambda p, s: progress.append((p, s)), **kwargs)

    return asyncio.run(run()), progress


def test_keyword_tasks():
    tasks = build_keyword_tasks("pizza")
    assert len(tasks) == 1
    assert tasks[0].kind is SearchKind.TEXT
    assert tasks[0].query == "pizza"


def test_category_tasks_nearby_first(config):
    tasks = build_category_tasks("both", config)
    assert [t.kind for t in tasks[:2]] == [SearchKind.NEARBY, SearchKind.NEARBY]
    assert [t.query for t in tasks[:2]] == ["car_repair", "car_dealer"]
    assert [t.query for t in tasks[2:]] == ["auto repair", "collision repair", "mechanic", "auto body"]


def test_category_tasks_unknown_type(config):
    with pytest.raises(ValueError, match="Unknown business type"):
        build_category_tasks("bakery", config)


def test_results_are_deduped_filtered_and_sorted(fake_google, config):
    fake_google.pages["pizza"] = [
        [_place_at("far", 8), _place_at("near", 1), _place_at("outside", 12)],
        [_place_at("mid", 4), _place_at("near", 1.5)],
    ]
    result, _ = _search(fake_google, config, "Plano, TX", 10, "pizza")

    ids = [p.place_id for p in result]
    assert ids == ["near", "mid", "far"]
    assert all(p.distance_miles <= 10 for p in result)
    distances = [p.distance_miles for p in result]
    assert distances == sorted(distances)
    # first-seen record wins
    assert result[0].distance_miles == pytest.approx(1.0, abs=0.1)
    assert result.statistics == {"total_raw": 5, "unique": 4, "within_radius": 3, "returned": 3}


def test_cap_is_min_of_requested_and_global(fake_google, config):
    fake_google.pages["pizza"] = [[_place_at(f"p{i}", i * 0.1) for i in range(20)]]

    result, _ = _search(fake_google, config, "Plano, TX", 10, "pizza", max_results=5)
    assert len(result) == 5

    capped = config.with_overrides(max_results=3)
    result, _ = _search(fake_google, capped, "Plano, TX", 10, "pizza", max_results=5)
    assert [p.place_id for p in result] == ["p0", "p1", "p2"]


def test_empty_results_are_not_an_error(fake_google, config):
    result, progress = _search(fake_google, config, "Plano, TX", 10, "pizza")
    assert len(result) == 0
    assert result.places == []
    assert progress[-1] == (100.0, "No results found")


def test_unknown_location_raises(fake_google, config):
    fake_google.geocode = {"status": "ZERO_RESULTS", "results": []}
    with pytest.raises(LocationNotFound):
        _search(fake_google, config, "ZZZZZZ", 10, "pizza")
    assert fake_google.search_requests == []


def test_non_positive_radius_rejected(fake_google, config):
    with pytest.raises(ValueError):
        _search(fake_google, config, "Plano, TX", 0, "pizza")


def test_progress_checkpoints(fake_google, config):
    fake_google.pages["pizza"] = [[_place_at("a", 1)]]
    _, progress = _search(fake_google, config, "Plano, TX", 10, "pizza")
    percents = [p for p, _ in progress]
    assert percents[:3] == [5.0, 10.0, 15.0]
    assert percents[-3:] == [85.0, 90.0, 100.0]
    assert percents == sorted(percents)
    assert progress[-1][1] == "Search completed!"


def test_metadata(fake_google, config):
    fake_google.pages["pizza"] = [[_place_at("a", 1)]]
    result, _ = _search(fake_google, config, "Plano, TX", 40, "pizza", country="US")
    assert result.metadata["location"] == "Plano, TX"
    assert result.metadata["keyword"] == "pizza"
    assert result.metadata["country"] == "US"
    assert result.metadata["radius_meters"] == 50000
    assert result.metadata["center"] == {"lat": CENTER_LAT, "lng": CENTER_LNG}


def test_category_search_runs_all_tasks_in_batches(fake_google, config):
    config = config.with_overrides(max_parallel_searches=2)
    fake_google.pages["car_repair"] = [[_place_at("shop1", 2)]]
    fake_google.pages["auto body"] = [[_place_at("shop1", 2), _place_at("shop2", 3)]]
    result, progress = _search(fake_google, config, "Plano, TX", 10, "both", category=True)

    queries = [b.get("textQuery") or b["includedTypes"][0] for b in fake_google.search_requests]
    assert sorted(queries) == sorted(
        ["car_repair", "car_dealer", "auto repair", "collision repair", "mechanic", "auto body"]
    )
    assert [p.place_id for p in result] == ["shop1", "shop2"]
    batches = [s for _, s in progress if s.startswith("Processing batch")]
    assert batches == ["Processing batch 1...", "Processing batch 2...", "Processing batch 3..."]


def test_search_batches_respect_parallel_limit(fake_google, config):
    config = config.with_overrides(max_parallel_searches=2)
    slow = SlowGoogle(fake_google)
    _search(slow, config, "Plano, TX", 10, "both", category=True)

    assert len(slow.completed) == 6
    assert slow.peak == 2


def test_auth_failure_waits_for_batch_siblings(fake_google, config):
    fake_google.page_errors[("car_repair", 1)] = 403
    slow = SlowGoogle(fake_google, delay=0.05)

    with pytest.raises(AuthenticationError):
        _search(slow, config, "Plano, TX", 10, "both", category=True)

    # the rest of the first batch finished before the error surfaced
    bodies = [json.loads(r.content) for r in slow.completed]
    finished = sorted(b.get("textQuery") or b["includedTypes"][0] for b in bodies)
    assert finished == ["auto repair", "car_dealer", "collision repair"]
    assert slow.in_flight == 0
    # the second batch never started
    queries = [b.get("textQuery") or b["includedTypes"][0] for b in fake_google.search_requests]
    assert "mechanic" not in queries
