"""
Search support: shared cache, retry policy, and performance monitoring in one module.
"""

import logging
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass, field
from threading import Lock
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)

# ----- Retry policy -----


@dataclass(frozen=True)
class RetryPolicy:
    max_attempts: int = 3
    backoff_base_seconds: float = 1.0
    max_backoff_seconds: float = 10.0
    retry_statuses: frozenset[int] = frozenset({403, 429})

    def backoff(self, attempt: int) -> float:
        """Delay before retrying after the given (1-based) failed attempt."""
        return min(self.backoff_base_seconds * (2 ** (attempt - 1)), self.max_backoff_seconds)

    def should_retry(self, status_code: Optional[int], attempt: int) -> bool:
        return status_code in self.retry_statuses and attempt < self.max_attempts


# ----- Cache -----


@dataclass(frozen=True)
class CacheEntry:
    data: Any
    expires_at: float


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    try:
        return len(value) == 0
    except TypeError:
        return False


class SearchCache:
    """
    Process-wide TTL cache shared by every adapter and the aggregate layer.

    Empty values are never stored, so a source that failed or found nothing is
    asked again on the next request. A confirmed not-found can still be pinned
    with set_not_found(). When full, the least recently used entry is evicted.
    """

    def __init__(
        self,
        ttl_seconds: float = 900,
        max_entries: Optional[int] = 500,
        clock: Callable[[], float] = time.time,
    ):
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._clock = clock
        self._entries: "OrderedDict[str, CacheEntry]" = OrderedDict()
        self._lock = Lock()
        self._sweeper: Optional[threading.Thread] = None
        self._stop = threading.Event()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def lookup(self, key: str) -> Optional[CacheEntry]:
        """Return the live entry (whose data may be None) or None on a miss."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if entry.expires_at <= self._clock():
                del self._entries[key]
                return None
            self._entries.move_to_end(key)
            return entry

    def get(self, key: str) -> Any:
        entry = self.lookup(key)
        return entry.data if entry else None

    def set(self, key: str, value: Any) -> None:
        if _is_empty(value):
            return
        self._store(key, value)

    def set_not_found(self, key: str) -> None:
        self._store(key, None)

    def _store(self, key: str, value: Any) -> None:
        with self._lock:
            if key in self._entries:
                del self._entries[key]
            elif self.max_entries is not None and len(self._entries) >= self.max_entries:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug("cache full, evicted %s", evicted)
            self._entries[key] = CacheEntry(data=value, expires_at=self._clock() + self.ttl_seconds)

    def sweep(self) -> int:
        now = self._clock()
        with self._lock:
            expired = [k for k, e in self._entries.items() if e.expires_at <= now]
            for key in expired:
                del self._entries[key]
            remaining = len(self._entries)
        logger.debug("cache sweep removed %d entries, %d remain", len(expired), remaining)
        return len(expired)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def start_sweeper(self, interval_seconds: float = 60) -> None:
        if self._sweeper is not None and self._sweeper.is_alive():
            return
        self._stop.clear()

        def _run():
            while not self._stop.wait(interval_seconds):
                self.sweep()

        self._sweeper = threading.Thread(target=_run, name="search-cache-sweeper", daemon=True)
        self._sweeper.start()

    def stop_sweeper(self) -> None:
        self._stop.set()
        if self._sweeper is not None:
            self._sweeper.join(timeout=1.0)
            self._sweeper = None


# ----- Performance monitor -----


@dataclass
class SearchMetrics:
    query: str
    api_name: str
    start_time: float
    end_time: Optional[float] = None
    success: bool = False
    result_count: int = 0
    error_kind: Optional[str] = None  # "unavailable" | "parse"
    error_message: Optional[str] = None
    cache_hit: bool = False

    @property
    def duration_seconds(self) -> float:
        return (self.end_time or 0.0) - self.start_time


@dataclass
class PerformanceStats:
    total_searches: int = 0
    successful_searches: int = 0
    failed_searches: int = 0
    unavailable_errors: int = 0
    parse_errors: int = 0
    cache_hits: int = 0
    total_duration_seconds: float = 0.0
    avg_duration_seconds: float = 0.0
    min_duration_seconds: float = 0.0
    max_duration_seconds: float = 0.0
    total_results: int = 0
    avg_results_per_search: float = 0.0


class PerformanceMonitor:
    def __init__(self, max_metrics: int = 1000):
        self._metrics: list[SearchMetrics] = []
        self._lock = Lock()
        self._max_metrics = max_metrics

    def start_search(self, query: str, api_name: str) -> SearchMetrics:
        return SearchMetrics(query=query, api_name=api_name, start_time=time.time())

    def _append(self, metric: SearchMetrics):
        with self._lock:
            self._metrics.append(metric)
            if len(self._metrics) > self._max_metrics:
                self._metrics = self._metrics[-self._max_metrics :]

    def record_success(self, metric: SearchMetrics, result_count: int, cache_hit: bool = False):
        metric.end_time = time.time()
        metric.success = True
        metric.result_count = result_count
        metric.cache_hit = cache_hit
        self._append(metric)

    def record_error(self, metric: SearchMetrics, error_kind: str, error_message: str):
        metric.end_time = time.time()
        metric.success = False
        metric.error_kind = error_kind
        metric.error_message = error_message
        self._append(metric)

    def api_names(self) -> list[str]:
        with self._lock:
            return sorted({m.api_name for m in self._metrics})

    def get_stats(self, api_name: Optional[str] = None) -> PerformanceStats:
        with self._lock:
            metrics = self._metrics.copy()
        if api_name:
            metrics = [m for m in metrics if m.api_name == api_name]
        if not metrics:
            return PerformanceStats()
        successful = [m for m in metrics if m.success]
        durations = [m.duration_seconds for m in metrics if m.end_time]
        total_results = sum(m.result_count for m in successful)
        return PerformanceStats(
            total_searches=len(metrics),
            successful_searches=len(successful),
            failed_searches=len(metrics) - len(successful),
            unavailable_errors=sum(1 for m in metrics if m.error_kind == "unavailable"),
            parse_errors=sum(1 for m in metrics if m.error_kind == "parse"),
            cache_hits=sum(1 for m in metrics if m.cache_hit),
            total_duration_seconds=sum(durations),
            avg_duration_seconds=sum(durations) / len(durations) if durations else 0.0,
            min_duration_seconds=min(durations) if durations else 0.0,
            max_duration_seconds=max(durations) if durations else 0.0,
            total_results=total_results,
            avg_results_per_search=total_results / len(successful) if successful else 0.0,
        )
