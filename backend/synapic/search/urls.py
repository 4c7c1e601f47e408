"""
Tracking-redirect unwrapping for engine result links.

Engines wrap outbound links in their own redirectors. Every wrapper is decoded
here so adapters only ever emit the final destination URL; a wrapper that cannot
be decoded yields None and the record is dropped.
"""

import base64
import binascii
from typing import Optional
from urllib.parse import parse_qs, urljoin, urlparse

# "http" base64-encoded; Bing prefixes the payload with a short marker such as "a1"
_B64_HTTP_PREFIX = "aHR0"


def is_http_url(url: Optional[str]) -> bool:
    if not url:
        return False
    parsed = urlparse(url)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def display_url(url: str) -> str:
    host = urlparse(url).hostname or ""
    return host[4:] if host.startswith("www.") else host


def _query_param(url: str, name: str) -> Optional[str]:
    values = parse_qs(urlparse(url).query).get(name)
    return values[0] if values else None


def unwrap_google(href: str) -> Optional[str]:
    """/url?q=<target> (relative or on google.*); also used by Searx instances."""
    parsed = urlparse(href)
    if parsed.path == "/url" and (not parsed.netloc or "google." in parsed.netloc):
        target = _query_param(href, "q") or _query_param(href, "url")
        return target if is_http_url(target) else None
    return href if is_http_url(href) else None


def unwrap_duckduckgo(href: str) -> Optional[str]:
    """//duckduckgo.com/l/?uddg=<percent-encoded target>."""
    if href.startswith("//"):
        href = "https:" + href
    parsed = urlparse(href)
    if parsed.path.startswith("/l/") and (not parsed.netloc or parsed.netloc.endswith("duckduckgo.com")):
        target = _query_param(href, "uddg")
        return target if is_http_url(target) else None
    return href if is_http_url(href) else None


def _b64_decode(payload: str) -> Optional[str]:
    payload = payload.replace("-", "+").replace("_", "/")
    payload += "=" * (-len(payload) % 4)
    try:
        return base64.b64decode(payload, validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        return None


def unwrap_bing(href: str) -> Optional[str]:
    """bing.com/ck/a?...&u=a1<base64 target>."""
    parsed = urlparse(href)
    if "bing.com" in parsed.netloc and parsed.path.startswith("/ck/a"):
        encoded = _query_param(href, "u")
        if not encoded:
            return None
        idx = encoded.find(_B64_HTTP_PREFIX)
        if idx == -1:
            return None
        target = _b64_decode(encoded[idx:])
        return target if is_http_url(target) else None
    return href if is_http_url(href) else None


def unwrap(href: str, base: str = "") -> Optional[str]:
    """Resolve any known wrapper; relative links are joined onto base first."""
    if not href or href.startswith("#"):
        return None
    if "duckduckgo.com/l/" in href or href.startswith("/l/?"):
        return unwrap_duckduckgo(href)
    if "bing.com/ck/a" in href:
        return unwrap_bing(href)
    if href.startswith("//"):
        href = "https:" + href
    parsed = urlparse(href)
    if parsed.path == "/url" and (not parsed.netloc or "google." in parsed.netloc):
        return unwrap_google(href)
    if not parsed.netloc and base:
        href = urljoin(base, href)
    return href if is_http_url(href) else None
