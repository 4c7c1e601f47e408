"""Tests for bang shortcut resolution."""

from synapic.search.bangs import BANGS, resolve


class TestResolve:
    def test_known_bang_with_terms(self):
        assert resolve("!gh express") == "https://github.com/search?q=express"

    def test_video_bang(self):
        assert resolve("!yt cats") == "https://www.youtube.com/results?search_query=cats"

    def test_terms_are_percent_encoded(self):
        assert resolve("!yt funny cats & dogs") == (
            "https://www.youtube.com/results?search_query=funny%20cats%20%26%20dogs"
        )

    def test_bang_is_case_insensitive(self):
        assert resolve("!GH express") == "https://github.com/search?q=express"

    def test_bang_without_terms_goes_to_homepage(self):
        assert resolve("!gh") == "https://github.com/"
        assert resolve("  !yt  ") == "https://www.youtube.com/"

    def test_not_a_bang(self):
        assert resolve("express !gh") is None
        assert resolve("openai") is None
        assert resolve("") is None

    def test_unknown_bang(self):
        assert resolve("!nope express") is None

    def test_custom_table(self):
        assert resolve("!x y", bangs={"!x": "https://x.test/?q="}) == "https://x.test/?q=y"

    def test_every_template_is_https(self):
        assert all(url.startswith("https://") for url in BANGS.values())
