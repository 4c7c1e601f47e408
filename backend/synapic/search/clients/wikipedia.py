"""Wikipedia REST summary client: one summary per query, or None."""

from typing import Any, Optional
from urllib.parse import quote

import requests

from synapic.search.clients.base import NotFound, ParseFailure, SourceAdapter, SourceUnavailable
from synapic.search.schemas import EncyclopediaSummary


class WikipediaAdapter(SourceAdapter):
    name = "wikipedia"
    timeout = 5.0
    singleton = True

    def build_request(self, query: str, start: int, locale: str) -> tuple[str, dict[str, Any]]:
        title = quote(query.strip(), safe="")
        return f"https://{locale}.wikipedia.org/api/rest_v1/page/summary/{title}", {}

    def execute(self, query: str, start: int, locale: str) -> Optional[EncyclopediaSummary]:
        try:
            return super().execute(query, start, locale)
        except SourceUnavailable as e:
            if e.status_code == 404:
                raise NotFound(f"no article for {query!r}") from e
            raise

    def parse(self, response: requests.Response, query: str, start: int, locale: str) -> EncyclopediaSummary:
        try:
            data = response.json()
        except ValueError as e:
            raise ParseFailure(f"invalid JSON: {e}") from e
        if not isinstance(data, dict):
            raise ParseFailure("summary is not an object")
        if not data.get("title") or not data.get("extract"):
            # A page without an extract (e.g. disambiguation stub) is a real miss
            raise NotFound(f"no extract for {query!r}")

        page_url = ((data.get("content_urls") or {}).get("desktop") or {}).get("page")
        return EncyclopediaSummary(
            title=data["title"],
            summary=data["extract"],
            image=(data.get("thumbnail") or {}).get("source"),
            url=page_url or f"https://{locale}.wikipedia.org/wiki/{quote(query.strip(), safe='')}",
        )
