"""Source adapters: one per external engine or content source."""

from .base import NotFound, ParseFailure, SearchError, SourceAdapter, SourceUnavailable
from .bing import BingAdapter, BingImagesAdapter
from .duckduckgo import DuckDuckGoAdapter
from .ecosia import EcosiaAdapter
from .gnews import GNewsAdapter
from .google import GoogleAdapter, GoogleNewsAdapter
from .ipinfo import IpInfoAdapter
from .searx import SearxAdapter
from .wikipedia import WikipediaAdapter
from .yandex import YandexAdapter
from .youtube import YouTubeAdapter

ADAPTER_CLASSES: dict[str, type[SourceAdapter]] = {
    cls.name: cls
    for cls in (
        GoogleAdapter,
        BingAdapter,
        DuckDuckGoAdapter,
        YandexAdapter,
        EcosiaAdapter,
        SearxAdapter,
        BingImagesAdapter,
        YouTubeAdapter,
        GNewsAdapter,
        GoogleNewsAdapter,
        WikipediaAdapter,
        IpInfoAdapter,
    )
}

__all__ = [
    "ADAPTER_CLASSES",
    "BingAdapter",
    "BingImagesAdapter",
    "DuckDuckGoAdapter",
    "EcosiaAdapter",
    "GNewsAdapter",
    "GoogleAdapter",
    "GoogleNewsAdapter",
    "IpInfoAdapter",
    "NotFound",
    "ParseFailure",
    "SearchError",
    "SearxAdapter",
    "SourceAdapter",
    "SourceUnavailable",
    "WikipediaAdapter",
    "YandexAdapter",
    "YouTubeAdapter",
]
