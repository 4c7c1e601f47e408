"""End-to-end tests for SearchService with every engine behind a fake session."""

import random

import pytest
import requests

from synapic.search.pipeline import build_search_service, parse_search_type
from synapic.search.ranking import UNWANTED_SCRIPTS, Ranker
from synapic.search.schemas import (
    ImageResponse,
    NewsResponse,
    NormalizedResult,
    SearchType,
    VideoResponse,
    WebResponse,
    WikiResponse,
)


@pytest.fixture
def routes(make_response, google_html, bing_html, duckduckgo_html, searx_html, youtube_html):
    """URL prefix -> response (or exception) served by the fake session."""
    return {
        "https://www.google.com/search": make_response(google_html),
        "https://www.bing.com/search": make_response(bing_html),
        "https://html.duckduckgo.com/html/": make_response(duckduckgo_html),
        "https://yandex.com.tr/": requests.ConnectionError("blocked"),
        "https://yandex.com/": requests.ConnectionError("blocked"),
        "https://www.ecosia.org/": make_response("", status=503),
        "https://searx.test/": make_response(searx_html),
        "https://www.youtube.com/": make_response(youtube_html),
        "https://tr.wikipedia.org/": make_response(
            json_body={"title": "OpenAI", "extract": "OpenAI bir yapay zeka şirketidir."}
        ),
        "https://gnews.io/": make_response(
            json_body={"articles": [{"title": "OpenAI news", "url": "https://news.test/openai", "source": {"name": "N"}}]}
        ),
    }


@pytest.fixture
def service(settings, cache, monitor, session, routes):
    def _route(url, params=None, headers=None, timeout=None):
        for prefix, outcome in routes.items():
            if url.startswith(prefix):
                if isinstance(outcome, Exception):
                    raise outcome
                return outcome
        raise requests.ConnectionError(f"unrouted {url}")

    session.get.side_effect = _route
    return build_search_service(
        settings=settings,
        session=session,
        cache=cache,
        monitor=monitor,
        ranker=Ranker(primary_locale="tr", rng=random.Random(0)),
    )


class TestParseSearchType:
    @pytest.mark.parametrize(
        "value,expected",
        [("web", SearchType.WEB), ("NEWS", SearchType.NEWS), (" image ", SearchType.IMAGE), ("bogus", SearchType.WEB), (None, SearchType.WEB)],
    )
    def test_values(self, value, expected):
        assert parse_search_type(value) == expected


class TestSearchService:
    def test_web_search_end_to_end(self, service, monitor):
        response = service.search("openai", "web", 0, "tr")

        assert isinstance(response, WebResponse)
        assert response.search_source == "Web Results"
        assert response.locale == "tr"
        assert response.country_code is None
        assert response.elapsed_time >= 0

        hosts = [r.display_url for r in response.results]
        assert hosts[:4] == ["openai.com"] * 4
        assert hosts[4] == "platform.openai.com"
        assert hosts[5] == "en.wikipedia.org"
        assert len(response.results) == 6
        assert len({r.link.rstrip("/") for r in response.results}) == 6

        assert monitor.get_stats("yandex").unavailable_errors == 2
        assert monitor.get_stats("ecosia").unavailable_errors == 2

    def test_second_page_comes_from_cache(self, service, session):
        service.search("openai", SearchType.WEB, 0, "tr")
        calls = session.get.call_count
        second = service.search("openai", SearchType.WEB, 10, "tr")
        assert second.results == []
        assert second.start == 10
        assert session.get.call_count == calls

    def test_all_sources_down_gives_empty_results(self, service, routes):
        for prefix in list(routes):
            routes[prefix] = requests.Timeout("slow")
        response = service.search("openai", SearchType.WEB, 0, "tr")
        assert response.results == []

    def test_unknown_type_falls_back_to_web(self, service):
        assert isinstance(service.search("openai", "spaceships", 0, "tr"), WebResponse)

    def test_default_locale(self, service):
        assert service.search("openai", "web").locale == "tr"

    def test_video(self, service):
        response = service.search("cats", "video", 0, "tr")
        assert isinstance(response, VideoResponse)
        assert [v.url for v in response.videos] == ["https://www.youtube.com/watch?v=abc123"]

    def test_news(self, service):
        response = service.search("openai", "news", 0, "tr")
        assert isinstance(response, NewsResponse)
        assert [n.link for n in response.news_results] == ["https://news.test/openai"]

    def test_image_source_failure_is_empty(self, service):
        response = service.search("cats", "image", 0, "tr")
        assert isinstance(response, ImageResponse)
        assert response.images == []

    def test_wiki(self, service):
        response = service.search("OpenAI", "wiki", 0, "tr")
        assert isinstance(response, WikiResponse)
        assert response.wiki.title == "OpenAI"
        assert response.wiki.url == "https://tr.wikipedia.org/wiki/OpenAI"
        assert response.search_source == "Wikipedia Result"

    def test_bang_redirect(self, service):
        assert service.bang_redirect("!gh express") == "https://github.com/search?q=express"
        assert service.bang_redirect("express") is None

    def test_country_hint_needs_token(self, service):
        assert service.search("openai", "wiki", 0, "tr", client_ip="1.2.3.4").country_code is None

    def test_invalid_locale_never_reaches_outbound_host(self, service, session):
        response = service.search("OpenAI", "wiki", 0, "169.254.169.254/latest/meta-data#")
        assert response.locale == "tr"
        assert session.get.call_args.args[0] == "https://tr.wikipedia.org/api/rest_v1/page/summary/OpenAI"


class TestBuildSearchService:
    def test_unwanted_scripts_from_settings(self, settings, cache, session):
        custom = settings.model_copy(update={"unwanted_scripts": "[0-9]"})
        ranker = build_search_service(settings=custom, session=session, cache=cache).aggregator.ranker
        assert ranker.unwanted_scripts.pattern == "[0-9]"
        kept = NormalizedResult(title="Arama", link="https://a.com/", source="Google")
        dropped = NormalizedResult(title="Top 10 tools", link="https://b.com/", source="Google")
        assert ranker.filter([kept, dropped]) == [kept]

    def test_default_unwanted_scripts(self, settings, cache, session):
        ranker = build_search_service(settings=settings, session=session, cache=cache).aggregator.ranker
        assert ranker.unwanted_scripts is UNWANTED_SCRIPTS
