import random
import re
from typing import Optional, Pattern
from urllib.parse import urlparse

from synapic.config import RankingWeights
from synapic.search.query import query_terms, target_domain
from synapic.search.schemas import NormalizedResult

# Cyrillic, Greek, Hebrew, Arabic, CJK ideographs, Kana, Hangul jamo and syllables
UNWANTED_SCRIPTS = re.compile(
    "[\u0400-\u04FF\u0370-\u03FF\u0590-\u05FF\u0600-\u06FF"
    "\u4E00-\u9FFF\u3040-\u30FF\u1100-\u11FF\uAC00-\uD7A3]"
)

ENGLISH_TLDS = (".co.uk", ".com.au", ".co.nz", ".ca")
GENERIC_TLDS = (".com", ".org", ".net", ".info", ".io", ".co", ".edu", ".gov")
INFORMATIVE_SITES = (
    "wikipedia.org",
    "reddit.com",
    "stackoverflow.com",
    "stackexchange.com",
    "quora.com",
    "imdb.com",
)


def is_unwanted_language(text: str, pattern: Pattern[str] = UNWANTED_SCRIPTS) -> bool:
    return bool(text) and pattern.search(text) is not None


def _hostname(link: str) -> Optional[str]:
    """Lowercased hostname, or None for unparsable links."""
    try:
        host = urlparse(link).hostname
    except ValueError:
        return None
    return host.lower() if host else None


class Ranker:
    """
    Scores merged web results by domain match, lexical match and locale, and
    orders them best first. rank() never mutates its input.
    """

    def __init__(
        self,
        weights: Optional[RankingWeights] = None,
        primary_locale: str = "tr",
        locale_countries: Optional[dict[str, str]] = None,
        unwanted_scripts: Pattern[str] = UNWANTED_SCRIPTS,
        rng: Optional[random.Random] = None,
    ):
        self.weights = weights or RankingWeights()
        self.primary_locale = primary_locale
        self.locale_countries = locale_countries or {"tr": "tr", "en": "us", "de": "de"}
        self.unwanted_scripts = unwanted_scripts
        self._rng = rng or random.Random()

    def country_for(self, locale: str) -> str:
        return self.locale_countries.get(locale, "us")

    def filter(self, results: list[NormalizedResult]) -> list[NormalizedResult]:
        return [
            r
            for r in results
            if not is_unwanted_language(r.title, self.unwanted_scripts)
            and not is_unwanted_language(r.snippet, self.unwanted_scripts)
        ]

    def _domain_score(self, host: str, target: str) -> float:
        w = self.weights
        clean = host[4:] if host.startswith("www.") else host
        if not target or target not in clean:
            return 0.0
        if clean.split(".")[0] == target:
            return w.exact_domain
        if f".{target}." in clean:
            return w.subdomain
        return w.partial_domain

    def _tld_score(self, host: str, locale: str) -> float:
        w = self.weights
        if host.endswith(f".{self.country_for(locale)}"):
            return w.country_tld
        if locale == "en" and host.endswith(ENGLISH_TLDS):
            return w.english_tld
        if host.endswith(GENERIC_TLDS):
            return w.generic_tld
        return w.baseline

    def score(self, result: NormalizedResult, query: str, locale: str) -> float:
        """Deterministic score; unparsable links score 0."""
        host = _hostname(result.link)
        if not host:
            return 0.0
        w = self.weights
        lower_query = query.lower().strip()
        title = result.title.lower()
        snippet = result.snippet.lower()

        score = self._domain_score(host, target_domain(query))
        if lower_query and lower_query in title:
            score += w.title_phrase
        if locale == self.primary_locale and host.endswith(f".{self.country_for(locale)}"):
            score += w.locale_tld
        for term in query_terms(query):
            if term in title:
                score += w.title_term
            if term in snippet:
                score += w.snippet_term
        if host.endswith(INFORMATIVE_SITES):
            score += w.informative_site
        score += self._tld_score(host, locale)
        return score

    def rank(self, results: list[NormalizedResult], query: str, locale: str) -> list[NormalizedResult]:
        """Filter unwanted scripts, then sort by score descending; jitter only breaks exact ties."""
        candidates = self.filter(results)
        keyed = [
            ((self.score(r, query, locale), self._rng.random() * self.weights.jitter), r)
            for r in candidates
        ]
        keyed.sort(key=lambda pair: pair[0], reverse=True)
        return [r for _, r in keyed]
