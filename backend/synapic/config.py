"""Application configuration."""
from functools import lru_cache

from pydantic import BaseModel
from pydantic_settings import BaseSettings


class RankingWeights(BaseModel):
    """Score contributions used by the web ranker. Tiers keep their relative order; values are tunable."""

    exact_domain: float = 15000
    subdomain: float = 10000
    partial_domain: float = 5000
    title_phrase: float = 1000
    locale_tld: float = 8000  # only for the primary locale
    title_term: float = 70
    snippet_term: float = 30
    informative_site: float = 80
    country_tld: float = 50
    english_tld: float = 40
    generic_tld: float = 30
    baseline: float = 10
    jitter: float = 5


class Settings(BaseSettings):
    """App settings from env."""

    gnews_api_key: str = ""
    ipinfo_token: str = ""
    searx_base_url: str = "https://searx.be"
    user_agent: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    )

    default_locale: str = "tr"
    primary_locale: str = "tr"  # locale whose country TLDs get the aggressive boost
    locale_countries: dict[str, str] = {"tr": "tr", "en": "us", "de": "de"}

    cache_ttl_seconds: int = 15 * 60
    cache_max_entries: int = 500
    cache_sweep_interval_seconds: int = 60

    page_size: int = 10
    max_workers: int = 10

    # Priority order: earlier sources win duplicate links
    web_sources: list[str] = ["google", "bing", "duckduckgo", "yandex", "ecosia", "searx"]
    web_fetch_offsets: list[int] = [0, 10]
    searx_page_count: int = 2

    ranking_weights: RankingWeights = RankingWeights()
    # Regex of scripts whose results are dropped before ranking; empty keeps the built-in set
    unwanted_scripts: str = ""

    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        extra = "ignore"

    def country_for(self, locale: str) -> str:
        return self.locale_countries.get(locale, "us")


@lru_cache
def get_settings() -> Settings:
    return Settings()
