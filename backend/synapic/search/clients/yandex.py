"""Yandex scraper. Pages by page number (p = offset // 10)."""

from typing import Any

import requests

from synapic.search.clients.base import SourceAdapter, node_text, parse_html, select_all, web_record
from synapic.search.schemas import NormalizedResult
from synapic.search.urls import unwrap

# Yandex region id for Turkey
_TR_REGION = 113


class YandexAdapter(SourceAdapter):
    name = "yandex"
    timeout = 7.0

    def headers(self, locale: str) -> dict[str, str]:
        headers = super().headers(locale)
        headers["Accept"] = "text/html,application/xhtml+xml"
        return headers

    def build_request(self, query: str, start: int, locale: str) -> tuple[str, dict[str, Any]]:
        params: dict[str, Any] = {"text": query, "p": start // 10, "lang": locale}
        if locale == "tr":
            params["lr"] = _TR_REGION
            return "https://yandex.com.tr/search/", params
        return "https://yandex.com/search/", params

    def parse(self, response: requests.Response, query: str, start: int, locale: str) -> list[NormalizedResult]:
        soup = parse_html(response)
        results = []
        for item in select_all(soup, "li.serp-item"):
            anchor = item.select_one("h2 a") or item.select_one("a.OrganicTitle-Link")
            if anchor is None:
                continue
            record = web_record(
                title=anchor.get_text(" ", strip=True),
                link=unwrap(anchor.get("href", "")),
                snippet=node_text(item, "div.organic__content-wrapper", ".OrganicText"),
                source="Yandex",
            )
            if record:
                results.append(record)
        return results
