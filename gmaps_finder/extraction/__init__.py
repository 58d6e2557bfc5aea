"""
Extraction module for searching and enriching businesses.

- search.py: Paginated execution of a single search task
- collector.py: Search orchestration (tasks, batches, assembly)
- enrichment.py: Place Details lookups and fill-if-better merge
- results.py: Dedupe/filter/sort/cap, SearchResultSet, progress reporting
"""

from .search import PlaceSearchClient, build_search_body
from .collector import SearchOrchestrator, build_category_tasks, build_keyword_tasks
from .enrichment import DetailEnricher, merge_details
from .results import (
    ProgressReporter,
    SearchResultSet,
    assemble_results,
    filter_by_distance,
    gather_batch,
    remove_duplicates,
    sort_by_distance,
)
