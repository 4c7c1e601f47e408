"""Search aggregation: source adapters, merge/dedup, ranking, and caching."""

from .bangs import resolve as resolve_bang
from .pipeline import SearchService, build_search_service
from .ranking import Ranker
from .schemas import (
    EncyclopediaSummary,
    ImageResult,
    NewsResult,
    NormalizedResult,
    SearchResponse,
    SearchType,
    VideoResult,
)
from .search_orchestrator import SearchAggregator, merge_results
from .support import PerformanceMonitor, RetryPolicy, SearchCache

__all__ = [
    "build_search_service",
    "resolve_bang",
    "merge_results",
    "EncyclopediaSummary",
    "ImageResult",
    "NewsResult",
    "NormalizedResult",
    "PerformanceMonitor",
    "Ranker",
    "RetryPolicy",
    "SearchAggregator",
    "SearchCache",
    "SearchResponse",
    "SearchService",
    "SearchType",
    "VideoResult",
]
