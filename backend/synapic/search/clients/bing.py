"""
Bing web and image scrapers. Bing pages by 1-based result index (first=1, 11, 21, ...)
and wraps result links in base64 click trackers.
"""

import json
from typing import Any

import requests

from synapic.search.clients.base import (
    SourceAdapter,
    build_record,
    node_text,
    parse_html,
    select_all,
    web_record,
)
from synapic.search.schemas import ImageResult, NormalizedResult
from synapic.search.urls import unwrap


def _market(settings, locale: str) -> str:
    return f"{locale}-{settings.country_for(locale).upper()}"


class BingAdapter(SourceAdapter):
    name = "bing"
    timeout = 7.0

    def build_request(self, query: str, start: int, locale: str) -> tuple[str, dict[str, Any]]:
        return "https://www.bing.com/search", {
            "q": query,
            "first": start + 1,
            "mkt": _market(self.settings, locale),
        }

    def parse(self, response: requests.Response, query: str, start: int, locale: str) -> list[NormalizedResult]:
        soup = parse_html(response)
        results = []
        for item in select_all(soup, "li.b_algo"):
            anchor = item.select_one("h2 a")
            if anchor is None:
                continue
            record = web_record(
                title=anchor.get_text(" ", strip=True),
                link=unwrap(anchor.get("href", "")),
                snippet=node_text(item, ".b_caption p", "div.b_caption div.b_snippet", "p.b_lineclamp2"),
                source="Bing",
            )
            if record:
                results.append(record)
        return results


class BingImagesAdapter(SourceAdapter):
    name = "bing_images"
    timeout = 7.0

    def build_request(self, query: str, start: int, locale: str) -> tuple[str, dict[str, Any]]:
        return "https://www.bing.com/images/search", {
            "q": query,
            "form": "HDRSC2",
            "first": start + 1,
            "mkt": _market(self.settings, locale),
        }

    def parse(self, response: requests.Response, query: str, start: int, locale: str) -> list[ImageResult]:
        soup = parse_html(response)
        results = []
        for anchor in select_all(soup, "a.iusc"):
            # Each tile carries its metadata as JSON in the "m" attribute
            try:
                meta = json.loads(anchor.get("m") or "")
            except json.JSONDecodeError:
                continue
            if not isinstance(meta, dict) or not meta.get("murl"):
                continue
            record = build_record(
                ImageResult,
                title=meta.get("t") or query,
                image=meta["murl"],
                thumbnail=meta.get("turl") or meta["murl"],
                link=meta.get("purl") or response.url,
            )
            if record:
                results.append(record)
        return results
