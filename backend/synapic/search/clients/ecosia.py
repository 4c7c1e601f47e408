"""Ecosia scraper. Pages by page number (p = offset // 10) and opts into retry."""

from typing import Any

import requests

from synapic.search.clients.base import SourceAdapter, node_text, parse_html, select_all, web_record
from synapic.search.schemas import NormalizedResult
from synapic.search.support import RetryPolicy
from synapic.search.urls import unwrap


class EcosiaAdapter(SourceAdapter):
    name = "ecosia"
    timeout = 12.0
    # Ecosia answers bursts with 403/429; a short backoff usually clears it
    retry_policy = RetryPolicy(max_attempts=3, backoff_base_seconds=1.0, max_backoff_seconds=4.0)

    def headers(self, locale: str) -> dict[str, str]:
        headers = super().headers(locale)
        headers.update(
            {
                "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
                "Referer": "https://www.ecosia.org/",
                "Upgrade-Insecure-Requests": "1",
            }
        )
        return headers

    def build_request(self, query: str, start: int, locale: str) -> tuple[str, dict[str, Any]]:
        return "https://www.ecosia.org/search", {"q": query, "p": start // 10, "l": locale}

    def parse(self, response: requests.Response, query: str, start: int, locale: str) -> list[NormalizedResult]:
        soup = parse_html(response)
        results = []
        for item in select_all(soup, "div.result"):
            anchor = item.select_one("a.result-title")
            if anchor is None:
                continue
            record = web_record(
                title=anchor.get_text(" ", strip=True),
                link=unwrap(anchor.get("href", "")),
                snippet=node_text(item, "p.result-snippet"),
                source="Ecosia",
                display=node_text(item, "span.result-url"),
            )
            if record:
                results.append(record)
        return results
