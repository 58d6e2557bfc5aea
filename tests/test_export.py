import csv
import json
from datetime import datetime, timezone

from gmaps_finder.config import CSV_COLUMNS
from gmaps_finder.export import default_output_paths, place_to_row, write_csv, write_json
from gmaps_finder.extraction.results import SearchResultSet
from gmaps_finder.models import Coordinates, HoursEntry, PlaceRecord


def _record(**kwargs):
    defaults = dict(
        place_id="abc",
        name="Joe's Pizza",
        address="1 Main St, Plano, TX",
        location=Coordinates(33.0, -96.7),
        distance_miles=2.345,
        fetched_at=datetime(2024, 5, 1, 12, 30, 0, tzinfo=timezone.utc),
    )
    defaults.update(kwargs)
    return PlaceRecord(**defaults)


def test_default_output_paths():
    json_path, csv_path = default_output_paths("Plano, TX", "Pizza Places")
    assert json_path.replace("\\", "/") == "output/pizza_places_near_plano.json"
    assert csv_path.replace("\\", "/") == "output/pizza_places_near_plano.csv"


def test_place_to_row():
    record = _record(
        phone="555-0100",
        rating=4.5,
        rating_count=12,
        price_level=2,
        categories=["restaurant", "food"],
        hours=[HoursEntry("Monday", "9 AM – 5 PM"), HoursEntry("Tuesday")],
    )
    row = place_to_row(record, location="Plano, TX", country="US")
    assert len(row) == len(CSV_COLUMNS)
    assert row[0] == "Joe's Pizza"
    assert row[2] == "555-0100"
    assert row[3] == ""
    assert row[6] == "$$"
    assert row[7] == "restaurant, food"
    assert row[8] == "Monday: 9 AM – 5 PM; Tuesday"
    assert row[9] == "2024-05-01 12:30:00"
    assert row[12] == "2.3"
    assert row[13].endswith("place_id:abc")


def test_write_csv(tmp_path):
    path = tmp_path / "out" / "places.csv"
    count = write_csv([_record(), _record(place_id="def")], str(path), location="Plano", country="US")
    assert count == 2

    with open(path, newline="", encoding="utf-8") as f:
        rows = list(csv.reader(f))
    assert rows[0] == CSV_COLUMNS
    assert len(rows) == 3
    assert rows[1][10] == "Plano"
    assert rows[1][11] == "US"


def test_write_json(tmp_path):
    path = tmp_path / "places.json"
    result = SearchResultSet([_record()], metadata={"keyword": "pizza"}, statistics={"returned": 1})
    write_json(result, str(path))

    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    assert data["metadata"] == {"keyword": "pizza"}
    assert data["statistics"] == {"returned": 1}
    assert data["places"][0]["name"] == "Joe's Pizza"
    assert data["places"][0]["fetched_at"] == "2024-05-01T12:30:00+00:00"
