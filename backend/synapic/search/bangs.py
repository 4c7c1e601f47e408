"""
Bang shortcuts: "!gh express" redirects straight to the target site's search
instead of running the aggregation pipeline.
"""

from typing import Optional
from urllib.parse import quote, urlparse

BANGS: dict[str, str] = {
    "!g": "https://www.google.com/search?q=",
    "!google": "https://www.google.com/search?q=",
    "!bing": "https://www.bing.com/search?q=",
    "!b": "https://www.bing.com/search?q=",
    "!ddg": "https://duckduckgo.com/?q=",
    "!yahoo": "https://search.yahoo.com/search?p=",
    "!y": "https://search.yahoo.com/search?p=",
    "!yandex": "https://yandex.com.tr/search/?text=",
    "!scholar": "https://scholar.google.com/scholar?q=",
    "!base": "https://www.base-search.net/Search/Results?lookfor=",
    "!w": "https://www.wikipedia.org/w/index.php?search=",
    "!wiki": "https://en.wikipedia.org/wiki/Special:Search?search=",
    "!wikipedia": "https://tr.wikipedia.org/wiki/Special:Search?search=",
    "!wp": "https://tr.wikipedia.org/wiki/Special:Search?search=",
    "!yt": "https://www.youtube.com/results?search_query=",
    "!news": "https://news.google.com/search?q=",
    "!gh": "https://github.com/search?q=",
    "!github": "https://github.com/search?q=",
    "!so": "https://stackoverflow.com/search?q=",
    "!r": "https://www.reddit.com/search?q=",
    "!t": "https://twitter.com/search?q=",
    "!imdb": "https://www.imdb.com/find/?q=",
    "!npm": "https://www.npmjs.com/search?q=",
    "!mdn": "https://developer.mozilla.org/en-US/search?q=",
    "!maps": "https://www.google.com/maps/search/",
    "!wa": "https://www.wolframalpha.com/input?i=",
    "!urban": "https://www.urbandictionary.com/define.php?term=",
    "!amazon": "https://www.amazon.com/s?k=",
    "!etsy": "https://www.etsy.com/search?q=",
    "!ebay": "https://www.ebay.com/sch/i.html?_nkw=",
}

# Same set of characters JavaScript's encodeURIComponent leaves alone
_UNRESERVED = "-_.!~*'()"


def _homepage(template: str) -> str:
    parsed = urlparse(template)
    return f"{parsed.scheme}://{parsed.netloc}/"


def resolve(query: str, bangs: Optional[dict[str, str]] = None) -> Optional[str]:
    """Target URL for a bang query, or None when the query is a normal search."""
    parts = (query or "").split()
    if not parts or not parts[0].startswith("!"):
        return None
    template = (bangs or BANGS).get(parts[0].lower())
    if template is None:
        return None
    remainder = " ".join(parts[1:])
    if not remainder:
        return _homepage(template)
    return template + quote(remainder, safe=_UNRESERVED)
