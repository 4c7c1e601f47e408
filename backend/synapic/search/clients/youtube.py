"""
YouTube search scraper. The results page embeds its data as a `ytInitialData`
JSON blob; video tiles are read from that rather than from the markup.
"""

import json
import re
from typing import Any

import requests

from synapic.search.clients.base import ParseFailure, SourceAdapter, build_record
from synapic.search.schemas import VideoResult

_INITIAL_DATA_RE = re.compile(r"var ytInitialData = ({.*?});</script>", re.DOTALL)

MAX_VIDEOS = 10


def _first_run(node: dict, key: str) -> str:
    runs = (node.get(key) or {}).get("runs") or []
    return (runs[0].get("text") or "") if runs else ""


def extract_initial_data(html: str) -> dict:
    match = _INITIAL_DATA_RE.search(html)
    if not match:
        raise ParseFailure("ytInitialData blob not found")
    try:
        return json.loads(match.group(1))
    except json.JSONDecodeError as e:
        raise ParseFailure(f"ytInitialData is not valid JSON: {e}") from e


class YouTubeAdapter(SourceAdapter):
    name = "youtube"
    timeout = 10.0

    def build_request(self, query: str, start: int, locale: str) -> tuple[str, dict[str, Any]]:
        return "https://www.youtube.com/results", {"search_query": query, "hl": locale}

    def parse(self, response: requests.Response, query: str, start: int, locale: str) -> list[VideoResult]:
        data = extract_initial_data(response.text)
        try:
            sections = data["contents"]["twoColumnSearchResultsRenderer"]["primaryContents"][
                "sectionListRenderer"
            ]["contents"]
            items = sections[0]["itemSectionRenderer"]["contents"]
        except (KeyError, IndexError, TypeError) as e:
            raise ParseFailure(f"unexpected ytInitialData shape: {e!r}") from e

        videos = []
        for item in items:
            renderer = item.get("videoRenderer")
            if not renderer or not renderer.get("videoId"):
                continue
            thumbnails = (renderer.get("thumbnail") or {}).get("thumbnails") or []
            record = build_record(
                VideoResult,
                title=_first_run(renderer, "title") or "No Title",
                url=f"https://www.youtube.com/watch?v={renderer['videoId']}",
                thumbnail=thumbnails[0].get("url", "") if thumbnails else "",
                source=_first_run(renderer, "ownerText") or "YouTube",
            )
            if record:
                videos.append(record)
            if len(videos) >= MAX_VIDEOS:
                break
        return videos
