"""
Search pipeline: bang check → per-type source selection → aggregate → shaped response.

Orchestrates: bang redirect (checked by the caller first) → aggregate-level cache →
parallel fetch across adapters (each behind its own cache) → merge/dedupe →
rank and filter (web) → page slice.
Entry points: SearchService.bang_redirect(query) and SearchService.search(...).
"""

import logging
import re
import time
from typing import Optional, Union

import requests

from synapic.config import Settings, get_settings
from synapic.search import bangs
from synapic.search.clients import ADAPTER_CLASSES, IpInfoAdapter, SourceAdapter, WikipediaAdapter
from synapic.search.query import normalize_locale
from synapic.search.ranking import UNWANTED_SCRIPTS, Ranker
from synapic.search.schemas import (
    ImageResponse,
    NewsResponse,
    SearchType,
    VideoResponse,
    WebResponse,
    WikiResponse,
)
from synapic.search.search_orchestrator import SearchAggregator
from synapic.search.support import PerformanceMonitor, SearchCache

logger = logging.getLogger(__name__)

IMAGE_SOURCES = ["bing_images"]
VIDEO_SOURCES = ["youtube"]
NEWS_SOURCES = ["gnews", "google_news"]

SEARCH_SOURCE_LABELS = {
    SearchType.WEB: "Web Results",
    SearchType.IMAGE: "Image Results",
    SearchType.VIDEO: "Video Results",
    SearchType.NEWS: "News Results",
    SearchType.WIKI: "Wikipedia Result",
}

AnySearchResponse = Union[WebResponse, ImageResponse, VideoResponse, NewsResponse, WikiResponse]


def parse_search_type(value: Union[str, SearchType, None]) -> SearchType:
    """Unknown or missing types fall back to web search."""
    if isinstance(value, SearchType):
        return value
    try:
        return SearchType((value or "web").strip().lower())
    except ValueError:
        return SearchType.WEB


class SearchService:
    def __init__(
        self,
        settings: Settings,
        cache: SearchCache,
        monitor: PerformanceMonitor,
        adapters: dict[str, SourceAdapter],
        aggregator: SearchAggregator,
    ):
        self.settings = settings
        self.cache = cache
        self.monitor = monitor
        self.adapters = adapters
        self.aggregator = aggregator

    def bang_redirect(self, query: str) -> Optional[str]:
        return bangs.resolve(query)

    def _country_hint(self, client_ip: Optional[str]) -> Optional[str]:
        geo = self.adapters.get("ipinfo")
        if not isinstance(geo, IpInfoAdapter):
            return None
        return geo.country(client_ip)

    def search(
        self,
        query: str,
        search_type: Union[str, SearchType, None] = SearchType.WEB,
        start: int = 0,
        locale: Optional[str] = None,
        client_ip: Optional[str] = None,
    ) -> AnySearchResponse:
        """
        Run one search and shape the response for its type.

        Args:
            query: User query (already checked for bangs by the caller).
            search_type: web, image, video, news or wiki; anything else means web.
            start: Zero-based logical offset into the aggregated list.
            locale: Language code steering sources and ranking; defaults to settings.default_locale.
            client_ip: Optional caller IP, used only to report a country hint.

        Returns:
            The response variant for the type. Empty when every source failed or found nothing.
        """
        t0 = time.perf_counter()
        query = (query or "").strip()
        kind = parse_search_type(search_type)
        locale = normalize_locale(locale, self.settings.default_locale)
        start = max(0, int(start or 0))

        common = {
            "query": query,
            "start": start,
            "locale": locale,
            "search_source": SEARCH_SOURCE_LABELS[kind],
            "country_code": self._country_hint(client_ip),
        }

        if kind == SearchType.WIKI:
            wiki_adapter = self.adapters.get("wikipedia")
            wiki = wiki_adapter.fetch(query, 0, locale) if isinstance(wiki_adapter, WikipediaAdapter) else None
            response: AnySearchResponse = WikiResponse(wiki=wiki, **common)
        elif kind == SearchType.IMAGE:
            images = self.aggregator.aggregate(query, kind, start, locale, IMAGE_SOURCES)
            response = ImageResponse(images=images, **common)
        elif kind == SearchType.VIDEO:
            videos = self.aggregator.aggregate(query, kind, start, locale, VIDEO_SOURCES)
            response = VideoResponse(videos=videos, **common)
        elif kind == SearchType.NEWS:
            news = self.aggregator.aggregate(query, kind, start, locale, NEWS_SOURCES)
            response = NewsResponse(news_results=news, **common)
        else:
            results = self.aggregator.aggregate(query, kind, start, locale, self.settings.web_sources)
            response = WebResponse(results=results, **common)

        response.elapsed_time = round(time.perf_counter() - t0, 2)
        logger.info(
            "search %s %r (start=%d, locale=%s) took %.2fs",
            kind.value, query, start, locale, response.elapsed_time,
        )
        return response


def build_search_service(
    settings: Optional[Settings] = None,
    session: Optional[requests.Session] = None,
    cache: Optional[SearchCache] = None,
    monitor: Optional[PerformanceMonitor] = None,
    ranker: Optional[Ranker] = None,
) -> SearchService:
    """Wire one shared cache, session and monitor into every adapter and the aggregator."""
    settings = settings or get_settings()
    session = session or requests.Session()
    if cache is None:
        cache = SearchCache(
            ttl_seconds=settings.cache_ttl_seconds,
            max_entries=settings.cache_max_entries,
        )
    monitor = monitor or PerformanceMonitor()
    adapters = {
        name: cls(settings=settings, cache=cache, session=session, monitor=monitor)
        for name, cls in ADAPTER_CLASSES.items()
    }
    ranker = ranker or Ranker(
        weights=settings.ranking_weights,
        primary_locale=settings.primary_locale,
        locale_countries=settings.locale_countries,
        unwanted_scripts=re.compile(settings.unwanted_scripts) if settings.unwanted_scripts else UNWANTED_SCRIPTS,
    )
    aggregator = SearchAggregator(
        adapters=adapters,
        cache=cache,
        ranker=ranker,
        web_fetch_offsets=settings.web_fetch_offsets,
        page_size=settings.page_size,
        max_workers=settings.max_workers,
    )
    return SearchService(settings, cache, monitor, adapters, aggregator)
