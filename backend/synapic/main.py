"""
Synapic Search API: aggregated web, image, video, news and wiki search.
"""

import logging
from contextlib import asynccontextmanager
from dataclasses import asdict
from functools import lru_cache
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.responses import RedirectResponse

from synapic.config import get_settings
from synapic.search import SearchResponse, SearchService, build_search_service

settings = get_settings()
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


@lru_cache
def get_service() -> SearchService:
    return build_search_service(settings)


@asynccontextmanager
async def lifespan(app: FastAPI):
    cache = get_service().cache
    cache.start_sweeper(settings.cache_sweep_interval_seconds)
    yield
    cache.stop_sweeper()


app = FastAPI(title="Synapic Search", version="0.1.0", lifespan=lifespan)


def _client_ip(request: Request) -> Optional[str]:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else None


@app.get("/health")
def health():
    return {"status": "ok"}


@app.get("/api/search", response_model=SearchResponse)
def search(
    request: Request,
    q: Optional[str] = Query(default=None),
    query: Optional[str] = Query(default=None),
    search_type: str = Query(default="web", alias="type"),
    start: int = Query(default=0),
    lang: Optional[str] = Query(default=None),
    service: SearchService = Depends(get_service),
):
    """
    Bang queries ("!gh express") redirect to the target site; everything else
    runs the aggregation pipeline. An empty result list means no source had
    anything, whether the engines were down or there are no matches.
    """
    text = (q or query or "").strip()
    if not text:
        raise HTTPException(status_code=400, detail="Search query missing!")

    target = service.bang_redirect(text)
    if target:
        return RedirectResponse(target, status_code=307)

    return service.search(text, search_type, start, lang, client_ip=_client_ip(request))


@app.get("/api/stats")
def stats(service: SearchService = Depends(get_service)):
    """Per-source fetch counts, failures by kind, cache hits and latency."""
    monitor = service.monitor
    return {
        "overall": asdict(monitor.get_stats()),
        "sources": {name: asdict(monitor.get_stats(name)) for name in monitor.api_names()},
        "cache_entries": len(service.cache),
    }
