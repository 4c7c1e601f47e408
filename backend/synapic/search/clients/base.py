"""
Source adapter base: one outbound request per fetch, parsed into normalized records.

Subclasses only build the request and parse the response. The shared fetch()
handles caching, retry, monitoring, and the degrade-to-empty policy: no adapter
ever raises to its caller.
"""

import logging
import time
from typing import Any, Callable, Optional, TypeVar

import requests
from bs4 import BeautifulSoup, Tag
from pydantic import BaseModel, ValidationError

from synapic.config import Settings
from synapic.search.query import normalize_locale, normalize_query
from synapic.search.schemas import NormalizedResult
from synapic.search.support import PerformanceMonitor, RetryPolicy, SearchCache
from synapic.search.urls import display_url

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


class SearchError(Exception):
    """Base exception for source adapter failures."""


class SourceUnavailable(SearchError):
    """Network error, timeout, or non-2xx response."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ParseFailure(SearchError):
    """The response body lacks the structure the adapter expects."""


class NotFound(SearchError):
    """The source confirmed there is nothing for this query (e.g. a 404 summary)."""


def build_record(model: type[M], **fields: Any) -> Optional[M]:
    """Construct a result model, or None when it fails validation (missing title, bad URL)."""
    try:
        return model(**fields)
    except ValidationError:
        return None


def web_record(
    title: str,
    link: Optional[str],
    snippet: str,
    source: str,
    display: str = "",
) -> Optional[NormalizedResult]:
    if not link:
        return None
    return build_record(
        NormalizedResult,
        title=title,
        link=link,
        snippet=snippet,
        display_url=display or display_url(link),
        source=source,
    )


def parse_html(response: requests.Response) -> BeautifulSoup:
    return BeautifulSoup(response.text, "html.parser")


def select_all(soup: BeautifulSoup, selector: str) -> list[Tag]:
    nodes = soup.select(selector)
    if not nodes:
        raise ParseFailure(f"no nodes matched {selector!r}")
    return nodes


def node_text(parent: Tag, *selectors: str) -> str:
    """Stripped text of the first selector that matches under parent."""
    for selector in selectors:
        node = parent.select_one(selector)
        if node is not None:
            text = node.get_text(" ", strip=True)
            if text:
                return text
    return ""


class SourceAdapter:
    name: str = ""
    timeout: float = 7.0
    retry_policy: Optional[RetryPolicy] = None
    # Singleton sources (encyclopedia, geo) degrade to None instead of []
    singleton: bool = False

    def __init__(
        self,
        settings: Settings,
        cache: SearchCache,
        session: requests.Session,
        monitor: PerformanceMonitor,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.settings = settings
        self.cache = cache
        self.session = session
        self.monitor = monitor
        self._sleep = sleep

    # ----- hooks -----

    def cursor(self, start: int) -> str:
        """Pagination component of the cache key."""
        return str(start)

    def build_request(self, query: str, start: int, locale: str) -> tuple[str, dict[str, Any]]:
        """Return (url, params) for the outbound GET."""
        raise NotImplementedError

    def headers(self, locale: str) -> dict[str, str]:
        return {
            "User-Agent": self.settings.user_agent,
            "Accept-Language": f"{locale}-{locale.upper()},{locale};q=0.9,en;q=0.8",
        }

    def parse(self, response: requests.Response, query: str, start: int, locale: str) -> Any:
        raise NotImplementedError

    # ----- shared flow -----

    def cache_key(self, query: str, start: int, locale: str) -> str:
        return f"{self.name}:{locale}:{self.cursor(start)}:{normalize_query(query)}"

    def _empty(self) -> Any:
        return None if self.singleton else []

    def get(self, url: str, params: Optional[dict[str, Any]] = None, locale: str = "en") -> requests.Response:
        """GET with timeout and optional retry; raises SourceUnavailable on failure."""
        attempt = 0
        while True:
            attempt += 1
            try:
                response = self.session.get(
                    url, params=params, headers=self.headers(locale), timeout=self.timeout
                )
                response.raise_for_status()
                return response
            except requests.exceptions.HTTPError as e:
                status = e.response.status_code if e.response is not None else None
                if self.retry_policy and self.retry_policy.should_retry(status, attempt):
                    delay = self.retry_policy.backoff(attempt)
                    logger.info("%s returned HTTP %s, retrying in %.1fs", self.name, status, delay)
                    self._sleep(delay)
                    continue
                raise SourceUnavailable(f"HTTP {status}", status_code=status) from e
            except requests.exceptions.RequestException as e:
                raise SourceUnavailable(str(e)) from e

    def execute(self, query: str, start: int, locale: str) -> Any:
        url, params = self.build_request(query, start, locale)
        response = self.get(url, params=params, locale=locale)
        return self.parse(response, query, start, locale)

    def fetch(self, query: str, start: int = 0, locale: Optional[str] = None) -> Any:
        locale = normalize_locale(locale, self.settings.default_locale)
        if not query or not query.strip():
            return self._empty()
        start = max(0, start)
        key = self.cache_key(query, start, locale)
        metric = self.monitor.start_search(query, self.name)

        entry = self.cache.lookup(key)
        if entry is not None:
            data = entry.data
            self.monitor.record_success(metric, _count(data), cache_hit=True)
            return data if data is not None else self._empty()

        try:
            result = self.execute(query, start, locale)
        except NotFound:
            self.monitor.record_success(metric, 0)
            self.cache.set_not_found(key)
            return self._empty()
        except SourceUnavailable as e:
            self.monitor.record_error(metric, "unavailable", str(e))
            logger.warning("%s unavailable for query %r: %s", self.name, query, e)
            return self._empty()
        except ParseFailure as e:
            self.monitor.record_error(metric, "parse", str(e))
            logger.warning("%s parse failure for query %r: %s", self.name, query, e)
            return self._empty()
        except Exception as e:
            self.monitor.record_error(metric, "parse", str(e))
            logger.exception("%s unexpected error for query %r", self.name, query)
            return self._empty()

        self.monitor.record_success(metric, _count(result))
        self.cache.set(key, result)
        return result


def _count(data: Any) -> int:
    if data is None:
        return 0
    if isinstance(data, list):
        return len(data)
    return 1
