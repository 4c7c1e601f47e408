import re
from typing import Optional

_PROTOCOL_RE = re.compile(r"^https?://(www\.)?")
_PATH_RE = re.compile(r"/.*$")
_COMMON_TLD_RE = re.compile(r"\.com|\.org|\.net|\.io|\.co|\.tr|\.de|\.us")
_LOCALE_RE = re.compile(r"[a-z]{2,3}")


def normalize_query(query: str) -> str:
    return " ".join(query.lower().split())


def normalize_locale(locale: Optional[str], default: str) -> str:
    """Two or three letter language code; anything else falls back to default."""
    value = (locale or "").strip().lower()
    return value if _LOCALE_RE.fullmatch(value) else default


def query_terms(query: str, min_length: int = 3) -> list[str]:
    """Lowercased terms long enough to count as per-term matches."""
    return [t for t in query.lower().split() if len(t) >= min_length]


def target_domain(query: str) -> str:
    """
    Domain label the query most likely names.

    "https://www.openai.com/blog" -> "openai", "github.com" -> "github",
    "open ai" -> "open ai" (only matches hostnames containing it verbatim).
    """
    q = query.lower().strip()
    q = _PROTOCOL_RE.sub("", q)
    q = _PATH_RE.sub("", q)
    q = _COMMON_TLD_RE.sub("", q).strip()
    return q.split(".")[0]
