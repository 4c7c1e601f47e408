"""
Searx scraper. Unlike the other engines it walks several pages per fetch, so its
cache key carries the page count and its timeout applies per page.
"""

import logging
from typing import Any

import requests

from synapic.search.clients.base import (
    ParseFailure,
    SearchError,
    SourceAdapter,
    SourceUnavailable,
    node_text,
    parse_html,
    select_all,
    web_record,
)
from synapic.search.schemas import NormalizedResult
from synapic.search.urls import unwrap

logger = logging.getLogger(__name__)


class SearxAdapter(SourceAdapter):
    name = "searx"
    timeout = 15.0

    @property
    def page_count(self) -> int:
        return max(1, self.settings.searx_page_count)

    @property
    def base_url(self) -> str:
        return self.settings.searx_base_url.rstrip("/")

    def cursor(self, start: int) -> str:
        return f"{start // 10}+{self.page_count}"

    def headers(self, locale: str) -> dict[str, str]:
        headers = super().headers(locale)
        headers["Referer"] = self.base_url
        return headers

    def build_request(self, query: str, start: int, locale: str) -> tuple[str, dict[str, Any]]:
        # start is a page index here; searx counts pages from 1
        return f"{self.base_url}/search", {"q": query, "pageno": start + 1, "language": locale}

    def execute(self, query: str, start: int, locale: str) -> list[NormalizedResult]:
        if not self.base_url:
            raise SourceUnavailable("no searx instance configured")
        first_page = start // 10
        results: list[NormalizedResult] = []
        seen: set[str] = set()
        failures: list[SearchError] = []
        for page in range(first_page, first_page + self.page_count):
            url, params = self.build_request(query, page, locale)
            try:
                page_results = self.parse(self.get(url, params=params, locale=locale), query, page, locale)
            except (SourceUnavailable, ParseFailure) as e:
                logger.info("searx page %d failed for query %r: %s", page, query, e)
                failures.append(e)
                continue
            for record in page_results:
                if record.link not in seen:
                    seen.add(record.link)
                    results.append(record)
        if not results and failures:
            raise failures[-1]
        return results

    def parse(self, response: requests.Response, query: str, start: int, locale: str) -> list[NormalizedResult]:
        soup = parse_html(response)
        results = []
        for item in select_all(soup, ".result"):
            anchor = item.select_one(".result-title a") or item.select_one("h3 a")
            if anchor is None:
                continue
            record = web_record(
                title=anchor.get_text(" ", strip=True),
                link=unwrap(anchor.get("href", ""), base=self.base_url),
                snippet=node_text(item, ".result-content .result-snippet", "p.content"),
                source="Searx",
            )
            if record:
                results.append(record)
        return results
