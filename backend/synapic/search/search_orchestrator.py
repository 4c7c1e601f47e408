"""
Search aggregator: parallel fetch across source adapters, merge by identity key,
rank, and cache the full list so later pages are slices of it.
"""

import concurrent.futures
import logging
from dataclasses import dataclass
from typing import Any, Optional, Sequence
from urllib.parse import urlsplit, urlunsplit

from synapic.search.clients import SearxAdapter, SourceAdapter
from synapic.search.query import normalize_query
from synapic.search.ranking import Ranker
from synapic.search.schemas import ImageResult, SearchType, VideoResult
from synapic.search.support import SearchCache

logger = logging.getLogger(__name__)


@dataclass
class SearchTask:
    priority: int
    adapter: SourceAdapter
    query: str
    start: int
    locale: str


def identity_key(record: Any) -> Optional[str]:
    """Dedup key: link (web/news), image URL (images) or url (videos)."""
    if isinstance(record, ImageResult):
        value = record.image
    elif isinstance(record, VideoResult):
        value = record.url
    else:
        value = getattr(record, "link", None)
    if not value:
        return None
    # Scheme and host are case-insensitive; path and query are not
    parts = urlsplit(value.strip())
    return urlunsplit(
        (parts.scheme.lower(), parts.netloc.lower(), parts.path.rstrip("/"), parts.query, parts.fragment)
    )


def merge_results(result_lists: Sequence[Sequence[Any]]) -> list[Any]:
    """First occurrence of each identity key wins; lists are walked in priority order."""
    seen: set[str] = set()
    merged = []
    for results in result_lists:
        for record in results:
            key = identity_key(record)
            if key and key not in seen:
                seen.add(key)
                merged.append(record)
    return merged


def _execute_search_task(task: SearchTask) -> list[Any]:
    return task.adapter.fetch(task.query, task.start, task.locale) or []


class SearchAggregator:
    def __init__(
        self,
        adapters: dict[str, SourceAdapter],
        cache: SearchCache,
        ranker: Ranker,
        web_fetch_offsets: Sequence[int] = (0, 10),
        page_size: int = 10,
        max_workers: int = 10,
    ):
        self.adapters = adapters
        self.cache = cache
        self.ranker = ranker
        self.web_fetch_offsets = list(web_fetch_offsets) or [0]
        self.page_size = page_size
        self.max_workers = max_workers

    def aggregate_key(self, query: str, search_type: SearchType, locale: str) -> str:
        return f"aggregate:{search_type.value}:{locale}:{normalize_query(query)}"

    def build_tasks(
        self, query: str, search_type: SearchType, locale: str, sources: Sequence[str]
    ) -> list[SearchTask]:
        tasks = []
        for name in sources:
            adapter = self.adapters.get(name)
            if adapter is None:
                logger.warning("unknown source %r skipped", name)
                continue
            if search_type == SearchType.WEB and not isinstance(adapter, SearxAdapter):
                offsets = self.web_fetch_offsets
            else:
                # Searx walks its own pages; non-web sources are fetched once
                offsets = [0]
            for offset in offsets:
                tasks.append(SearchTask(len(tasks), adapter, query, offset, locale))
        return tasks

    def collect(
        self, query: str, search_type: SearchType, locale: str, sources: Sequence[str]
    ) -> list[Any]:
        """Fan out to every source concurrently and merge in priority order."""
        tasks = self.build_tasks(query, search_type, locale, sources)
        if not tasks:
            return []
        results_by_priority: dict[int, list[Any]] = {}
        max_workers = min(self.max_workers, len(tasks))
        with concurrent.futures.ThreadPoolExecutor(max_workers=max_workers) as executor:
            future_to_task = {executor.submit(_execute_search_task, task): task for task in tasks}
            for future in concurrent.futures.as_completed(future_to_task):
                task = future_to_task[future]
                try:
                    results_by_priority[task.priority] = future.result()
                except Exception:
                    logger.exception("search task %s(start=%d) failed", task.adapter.name, task.start)
                    results_by_priority[task.priority] = []
        return merge_results([results_by_priority[p] for p in sorted(results_by_priority)])

    def full_list(
        self, query: str, search_type: SearchType, locale: str, sources: Sequence[str]
    ) -> list[Any]:
        key = self.aggregate_key(query, search_type, locale)
        cached = self.cache.get(key)
        if cached:
            return cached
        merged = self.collect(query, search_type, locale, sources)
        if search_type == SearchType.WEB:
            merged = self.ranker.rank(merged, query, locale)
        logger.info(
            "aggregated %d %s results for %r from %s", len(merged), search_type.value, query, list(sources)
        )
        self.cache.set(key, merged)
        return merged

    def aggregate(
        self,
        query: str,
        search_type: SearchType,
        start: int,
        locale: str,
        sources: Sequence[str],
    ) -> list[Any]:
        full = self.full_list(query, search_type, locale, sources)
        start = max(0, start)
        return full[start : start + self.page_size]
