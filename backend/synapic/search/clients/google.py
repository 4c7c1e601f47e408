"""
Google web and news scrapers. Google pages by result index: start=0, 10, 20, ...
"""

from typing import Any, Optional

import requests

from synapic.search.clients.base import (
    SourceAdapter,
    build_record,
    node_text,
    parse_html,
    select_all,
    web_record,
)
from synapic.search.schemas import NewsResult, NormalizedResult
from synapic.search.urls import display_url, unwrap

BASE_URL = "https://www.google.com/search"


class GoogleAdapter(SourceAdapter):
    name = "google"
    timeout = 7.0

    def build_request(self, query: str, start: int, locale: str) -> tuple[str, dict[str, Any]]:
        return BASE_URL, {
            "q": query,
            "start": start,
            "hl": locale,
            "gl": self.settings.country_for(locale),
            "lr": f"lang_{locale}",
        }

    def parse(self, response: requests.Response, query: str, start: int, locale: str) -> list[NormalizedResult]:
        soup = parse_html(response)
        results = []
        for block in select_all(soup, "div.g"):
            anchor = block.select_one("a[jsname][href]") or block.select_one("a[href]")
            if anchor is None:
                continue
            href = anchor.get("href", "")
            if href.startswith(("/search", "#")):
                continue
            record = web_record(
                title=node_text(block, "h3"),
                link=unwrap(href),
                snippet=node_text(block, 'div[data-sncf="1"]', "div.VwiC3b", "span.st"),
                source="Google",
            )
            if record:
                results.append(record)
        return results


class GoogleNewsAdapter(SourceAdapter):
    name = "google_news"
    timeout = 7.0

    def build_request(self, query: str, start: int, locale: str) -> tuple[str, dict[str, Any]]:
        return BASE_URL, {
            "q": query,
            "tbm": "nws",
            "start": start,
            "hl": locale,
            "gl": self.settings.country_for(locale),
        }

    def parse(self, response: requests.Response, query: str, start: int, locale: str) -> list[NewsResult]:
        soup = parse_html(response)
        results = []
        for block in select_all(soup, "div.SoaBEf"):
            anchor = block.select_one("a[href]")
            if anchor is None:
                continue
            link = unwrap(anchor.get("href", ""))
            if not link:
                continue
            source_and_time = node_text(block, "div.MgUUmf", "div.XTjFC.WF4CUc")
            image = _image_src(block)
            record = build_record(
                NewsResult,
                title=node_text(block, 'div[role="heading"]'),
                link=link,
                snippet=node_text(block, "div.GI74Re"),
                display_url=display_url(link),
                source=source_and_time.split("·")[0].strip() or "Google News",
                image=image,
            )
            if record:
                results.append(record)
        return results


def _image_src(block) -> Optional[str]:
    img = block.select_one("img")
    src = img.get("src") if img is not None else None
    # Inline base64 placeholders are useless outside the results page
    if src and src.startswith("http"):
        return src
    return None
