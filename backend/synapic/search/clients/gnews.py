"""
GNews JSON API client. Uses GNEWS_API_KEY; without a key the source is reported
unavailable and contributes nothing.
"""

from typing import Any

import requests

from synapic.search.clients.base import ParseFailure, SourceAdapter, SourceUnavailable, build_record
from synapic.search.schemas import NewsResult
from synapic.search.support import RetryPolicy
from synapic.search.urls import display_url, is_http_url

GNEWS_BASE_URL = "https://gnews.io/api/v4/search"


class GNewsAdapter(SourceAdapter):
    name = "gnews"
    timeout = 7.0
    retry_policy = RetryPolicy(max_attempts=2, backoff_base_seconds=1.0, retry_statuses=frozenset({429}))

    def build_request(self, query: str, start: int, locale: str) -> tuple[str, dict[str, Any]]:
        return GNEWS_BASE_URL, {
            "q": query,
            "lang": locale,
            "country": self.settings.country_for(locale),
            "max": 10,
            "apikey": self.settings.gnews_api_key,
        }

    def execute(self, query: str, start: int, locale: str) -> list[NewsResult]:
        if not self.settings.gnews_api_key:
            raise SourceUnavailable("GNEWS_API_KEY is not configured")
        return super().execute(query, start, locale)

    def parse(self, response: requests.Response, query: str, start: int, locale: str) -> list[NewsResult]:
        try:
            data = response.json()
        except ValueError as e:
            raise ParseFailure(f"invalid JSON: {e}") from e
        articles = data.get("articles") if isinstance(data, dict) else None
        if not isinstance(articles, list):
            raise ParseFailure("response has no 'articles' list")

        results = []
        for article in articles:
            link = article.get("url")
            if not is_http_url(link):
                continue
            record = build_record(
                NewsResult,
                title=article.get("title") or "",
                link=link,
                snippet=article.get("description") or "",
                display_url=display_url(link),
                source=(article.get("source") or {}).get("name") or "News Source",
                image=article.get("image"),
                date=article.get("publishedAt"),
            )
            if record:
                results.append(record)
        return results
