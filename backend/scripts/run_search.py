"""
Run the full search pipeline against the live engines and print what each stage produced.

Run with:
  python backend/scripts/run_search.py
  python backend/scripts/run_search.py "your query" [web|image|video|news|wiki] [locale]

Optional env (or .env): GNEWS_API_KEY for news, IPINFO_TOKEN is not used here.
Prints per-source result counts, the merged list before ranking, the ranked
first page, and per-source timing so selector breakage is easy to spot.
"""

import sys
from textwrap import shorten

from synapic.config import get_settings
from synapic.search import SearchType, build_search_service
from synapic.search.pipeline import parse_search_type


def _trunc(s: str, max_len: int = 72) -> str:
    return shorten(s, width=max_len, placeholder="…") if s else ""


def _section(title: str) -> None:
    print()
    print("=" * 80)
    print(f"  {title}")
    print("=" * 80)


def main() -> None:
    query = (sys.argv[1] if len(sys.argv) > 1 else "openai").strip() or "openai"
    kind = parse_search_type(sys.argv[2] if len(sys.argv) > 2 else "web")
    settings = get_settings()
    locale = sys.argv[3] if len(sys.argv) > 3 else settings.default_locale

    service = build_search_service(settings)

    redirect = service.bang_redirect(query)
    if redirect:
        _section("BANG")
        print(f"{query!r} redirects to {redirect}")
        return

    if kind == SearchType.WEB:
        _section("Per-source fetch (web)")
        for name in settings.web_sources:
            adapter = service.adapters[name]
            results = adapter.fetch(query, 0, locale) or []
            print(f"  {name:<12} {len(results):>3} results")

        _section("Merged before ranking")
        merged = service.aggregator.collect(query, kind, locale, settings.web_sources)
        print(f"{'#':>3}  {'source':<10}  {'domain':<30}  title")
        print("-" * 80)
        for i, r in enumerate(merged, 1):
            print(f"{i:>3}  {r.source:<10}  {r.display_url[:28]:<30}  {_trunc(r.title, 34)}")

    _section(f"Response ({kind.value}, locale={locale})")
    response = service.search(query, kind, 0, locale)
    print(response.model_dump_json(indent=2, by_alias=True))

    _section("Source stats")
    for name in service.monitor.api_names():
        stats = service.monitor.get_stats(name)
        print(
            f"  {name:<12} ok={stats.successful_searches} unavailable={stats.unavailable_errors} "
            f"parse={stats.parse_errors} cache_hits={stats.cache_hits} "
            f"avg={stats.avg_duration_seconds:.2f}s"
        )
    print()


if __name__ == "__main__":
    main()
