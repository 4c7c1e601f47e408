"""Tests for redirect unwrapping and query helpers."""

import pytest

from synapic.search.query import normalize_locale, normalize_query, query_terms, target_domain
from synapic.search.urls import display_url, unwrap, unwrap_bing, unwrap_duckduckgo, unwrap_google


class TestUnwrap:
    def test_google_relative_redirect(self):
        assert unwrap("/url?q=https://openai.com/&sa=U&ved=x") == "https://openai.com/"

    def test_google_absolute_redirect(self):
        assert unwrap_google("https://www.google.com/url?url=https://example.com/a") == "https://example.com/a"

    def test_google_redirect_to_non_http_dropped(self):
        assert unwrap("/url?q=/search?q=x") is None

    def test_duckduckgo_uddg(self):
        href = "//duckduckgo.com/l/?uddg=https%3A%2F%2Fexample.com%2Fpage%3Fa%3D1&rut=abc"
        assert unwrap(href) == "https://example.com/page?a=1"
        assert unwrap_duckduckgo(href) == "https://example.com/page?a=1"

    def test_duckduckgo_missing_target(self):
        assert unwrap("https://duckduckgo.com/l/?rut=abc") is None

    def test_bing_base64(self):
        href = "https://www.bing.com/ck/a?!&&p=123&u=a1aHR0cHM6Ly9leGFtcGxlLmNvbS8&ntb=1"
        assert unwrap(href) == "https://example.com/"
        assert unwrap_bing(href) == "https://example.com/"

    def test_bing_undecodable(self):
        assert unwrap("https://www.bing.com/ck/a?u=a1notbase64") is None
        assert unwrap("https://www.bing.com/ck/a?p=1") is None

    def test_plain_links_pass_through(self):
        assert unwrap("https://example.com/x") == "https://example.com/x"
        assert unwrap("//cdn.example.com/x") == "https://cdn.example.com/x"

    def test_relative_joined_onto_base(self):
        assert unwrap("/page", base="https://searx.test") == "https://searx.test/page"

    @pytest.mark.parametrize("href", ["", "#", "#top", "javascript:void(0)", "/relative/no/base"])
    def test_unusable_links(self, href):
        assert unwrap(href) is None


class TestDisplayUrl:
    def test_strips_www(self):
        assert display_url("https://www.openai.com/blog") == "openai.com"
        assert display_url("https://platform.openai.com/") == "platform.openai.com"


class TestQueryHelpers:
    def test_normalize_query(self):
        assert normalize_query("  OpenAI   GPT ") == "openai gpt"

    @pytest.mark.parametrize(
        "locale,expected",
        [("en", "en"), (" DE ", "de"), ("fil", "fil"), (None, "tr"), ("", "tr"), ("en-US", "tr"), ("evil.com/", "tr")],
    )
    def test_normalize_locale(self, locale, expected):
        assert normalize_locale(locale, "tr") == expected

    def test_query_terms(self):
        assert query_terms("an OpenAI api") == ["openai", "api"]

    @pytest.mark.parametrize(
        "query,expected",
        [
            ("openai", "openai"),
            ("https://www.openai.com/blog", "openai"),
            ("github.com", "github"),
            ("example.co.tr", "example"),
            ("open ai", "open ai"),
        ],
    )
    def test_target_domain(self, query, expected):
        assert target_domain(query) == expected
