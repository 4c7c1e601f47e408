"""Pytest fixtures for search tests. No test touches the network."""

import json
from unittest.mock import MagicMock

import pytest
import requests

from synapic.config import Settings
from synapic.search.support import PerformanceMonitor, SearchCache


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def _build_response(body="", status=200, url="https://example.test/", json_body=None) -> requests.Response:
    """Real requests.Response so raise_for_status/json behave as in production."""
    response = requests.Response()
    response.status_code = status
    response.url = url
    response.encoding = "utf-8"
    if json_body is not None:
        body = json.dumps(json_body)
    response._content = body.encode("utf-8")
    return response


@pytest.fixture
def make_response():
    return _build_response


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        gnews_api_key="test-key",
        ipinfo_token="",
        searx_base_url="https://searx.test",
        default_locale="tr",
        primary_locale="tr",
    )


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return SearchCache(ttl_seconds=900, max_entries=500, clock=clock)


@pytest.fixture
def monitor():
    return PerformanceMonitor()


@pytest.fixture
def session():
    return MagicMock(spec=requests.Session)


@pytest.fixture
def adapter_factory(settings, cache, session, monitor):
    """Build an adapter wired to the shared fake session; sleep is recorded, never real."""

    def _make(cls, **overrides):
        sleeps = []
        adapter = cls(
            settings=overrides.get("settings", settings),
            cache=overrides.get("cache", cache),
            session=overrides.get("session", session),
            monitor=overrides.get("monitor", monitor),
            sleep=sleeps.append,
        )
        adapter.sleeps = sleeps
        return adapter

    return _make


@pytest.fixture
def google_html():
    return """
    <html><body>
      <div class="g">
        <a href="/url?q=https://openai.com/&amp;sa=U"><h3>OpenAI</h3></a>
        <div class="VwiC3b">Creating safe AGI that benefits all of humanity.</div>
      </div>
      <div class="g">
        <a href="https://en.wikipedia.org/wiki/OpenAI"><h3>OpenAI - Wikipedia</h3></a>
        <div class="VwiC3b">OpenAI is an American artificial intelligence organization.</div>
      </div>
      <div class="g">
        <a href="/search?q=openai+news"><h3>People also search</h3></a>
      </div>
      <div class="g">
        <a href="https://no-title.example.com/"></a>
      </div>
    </body></html>
    """


@pytest.fixture
def bing_html():
    # u= carries "a1" + base64("https://openai.com/")
    return """
    <html><body><ol id="b_results">
      <li class="b_algo">
        <h2><a href="https://www.bing.com/ck/a?!&amp;&amp;p=abc&amp;u=a1aHR0cHM6Ly9vcGVuYWkuY29tLw&amp;ntb=1">OpenAI</a></h2>
        <div class="b_caption"><p>OpenAI official site.</p></div>
      </li>
      <li class="b_algo">
        <h2><a href="https://platform.openai.com/docs">OpenAI Platform</a></h2>
        <div class="b_caption"><p>Developer docs.</p></div>
      </li>
    </ol></body></html>
    """


@pytest.fixture
def duckduckgo_html():
    return """
    <html><body>
      <div class="result results_links web-result">
        <h2 class="result__title">
          <a class="result__a" href="//duckduckgo.com/l/?uddg=https%3A%2F%2Fopenai.com%2Fblog&amp;rut=x">OpenAI Blog</a>
        </h2>
        <a class="result__snippet">News and research from OpenAI.</a>
      </div>
    </body></html>
    """


@pytest.fixture
def searx_html():
    return """
    <html><body>
      <article class="result">
        <h3><a href="https://openai.com/research">Research</a></h3>
        <p class="content">OpenAI research index.</p>
      </article>
      <article class="result">
        <h3><a href="/url?q=https://openai.com/about">About</a></h3>
        <p class="content">About OpenAI.</p>
      </article>
    </body></html>
    """


@pytest.fixture
def youtube_html():
    data = {
        "contents": {
            "twoColumnSearchResultsRenderer": {
                "primaryContents": {
                    "sectionListRenderer": {
                        "contents": [
                            {
                                "itemSectionRenderer": {
                                    "contents": [
                                        {
                                            "videoRenderer": {
                                                "videoId": "abc123",
                                                "title": {"runs": [{"text": "Cats compilation"}]},
                                                "ownerText": {"runs": [{"text": "Cat Channel"}]},
                                                "thumbnail": {"thumbnails": [{"url": "https://i.ytimg.com/vi/abc123/hq.jpg"}]},
                                            }
                                        },
                                        {"shelfRenderer": {}},
                                        {"videoRenderer": {"title": {"runs": [{"text": "No id"}]}}},
                                    ]
                                }
                            }
                        ]
                    }
                }
            }
        }
    }
    return f"<html><script>var ytInitialData = {json.dumps(data)};</script></html>"
