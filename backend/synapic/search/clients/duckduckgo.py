"""DuckDuckGo HTML scraper; no API key required."""

from typing import Any

import requests

from synapic.search.clients.base import SourceAdapter, node_text, parse_html, select_all, web_record
from synapic.search.schemas import NormalizedResult
from synapic.search.urls import unwrap


class DuckDuckGoAdapter(SourceAdapter):
    name = "duckduckgo"
    timeout = 10.0

    @staticmethod
    def native_offset(start: int) -> int:
        # The HTML endpoint serves 20 results per page; logical pages are 10 wide
        return (start // 10) * 20

    def cursor(self, start: int) -> str:
        return str(self.native_offset(start))

    def build_request(self, query: str, start: int, locale: str) -> tuple[str, dict[str, Any]]:
        return "https://html.duckduckgo.com/html/", {
            "q": query,
            "s": self.native_offset(start),
            "kl": f"{locale}-{locale.upper()}",
            "df": "",
        }

    def parse(self, response: requests.Response, query: str, start: int, locale: str) -> list[NormalizedResult]:
        soup = parse_html(response)
        results = []
        for item in select_all(soup, "div.web-result, div.result"):
            anchor = item.select_one("h2 a.result__a") or item.select_one("a.result__a")
            if anchor is None:
                continue
            record = web_record(
                title=anchor.get_text(" ", strip=True),
                link=unwrap(anchor.get("href", "")),
                snippet=node_text(item, "a.result__snippet", ".result__snippet"),
                source="DuckDuckGo",
            )
            if record:
                results.append(record)
        return results
