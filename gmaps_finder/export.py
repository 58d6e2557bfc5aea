"""
File Export

Writes search results to CSV (spreadsheet-friendly columns) and JSON
(metadata, statistics and full place records).
"""

import csv
import json
import os
import re
from datetime import datetime
from typing import Iterable, List, Optional, Tuple

from .config import CSV_COLUMNS
from .extraction.results import SearchResultSet
from .models import PlaceRecord


def _safe_name(text: str) -> str:
    return re.sub(r"[^a-z0-9]+", "_", text.strip().lower()).strip("_") or "search"


def default_output_paths(location: str, keyword: str, output_dir: str = "output") -> Tuple[str, str]:
    """(json_path, csv_path) like output/pizza_near_plano.json"""
    safe_location = _safe_name(location.split(",")[0])
    safe_keyword = _safe_name(keyword)
    base = os.path.join(output_dir, f"{safe_keyword}_near_{safe_location}")
    return f"{base}.json", f"{base}.csv"


def _format_hours(place: PlaceRecord) -> str:
    if not place.hours:
        return ""
    return "; ".join(f"{h.day}: {h.text}" if h.text else h.day for h in place.hours)


def place_to_row(
    place: PlaceRecord,
    location: str = "",
    country: str = "",
    searched_at: Optional[datetime] = None,
) -> List:
    """One CSV row, in CSV_COLUMNS order."""
    searched_at = searched_at or place.fetched_at
    return [
        place.name or "",
        place.address or "",
        place.phone or "",
        place.website or "",
        place.rating if place.rating is not None else "",
        place.rating_count or "",
        "$" * place.price_level if place.price_level else "",
        ", ".join(place.categories),
        _format_hours(place),
        searched_at.strftime("%Y-%m-%d %H:%M:%S"),
        location,
        country,
        f"{place.distance_miles:.1f}",
        place.maps_url,
    ]


def write_csv(
    places: Iterable[PlaceRecord],
    csv_path: str,
    location: str = "",
    country: str = "",
) -> int:
    """Write places to a CSV file with a header row. Returns rows written."""
    directory = os.path.dirname(csv_path)
    if directory:
        os.makedirs(directory, exist_ok=True)

    count = 0
    with open(csv_path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(CSV_COLUMNS)
        for place in places:
            writer.writerow(place_to_row(place, location, country))
            count += 1
    return count


def write_json(result: SearchResultSet, output_file: str) -> None:
    """Save the full result (metadata, statistics, places) as JSON."""
    directory = os.path.dirname(output_file)
    if directory:
        os.makedirs(directory, exist_ok=True)

    with open(output_file, "w", encoding="utf-8") as f:
        json.dump(result.to_dict(), f, indent=2, ensure_ascii=False)
