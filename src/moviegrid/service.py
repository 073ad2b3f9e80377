from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass

import httpx

from moviegrid.catalog.client import CatalogClient
from moviegrid.catalog.models import EnrichedMovie
from moviegrid.config import Config
from moviegrid.movies.enrich import Catalog, MovieEnricher
from moviegrid.movies.landing import build_landing_page
from moviegrid.movies.popular import random_popular_movies
from moviegrid.search.llm import QueryRouter
from moviegrid.util.logging import get_logger
from moviegrid.util.sampling import Sampler
from moviegrid.video.lookup import ScrapeVideoLookup, VideoLookup

LOG = get_logger(__name__)


@dataclass
class MovieService:
    cfg: Config
    catalog: Catalog
    videos: VideoLookup
    enricher: MovieEnricher
    sampler: Sampler
    router: QueryRouter | None = None

    async def landing_page(self) -> list[EnrichedMovie]:
        return await build_landing_page(
            self.catalog,
            self.enricher,
            self.sampler,
            trending_count=self.cfg.landing.trending_count,
            top_rated_count=self.cfg.landing.top_rated_count,
        )

    async def popular(self) -> list[EnrichedMovie]:
        return await random_popular_movies(
            self.cfg.database_path,
            self.enricher,
            self.sampler,
            pool_size=self.cfg.popular.pool_size,
            sample_size=self.cfg.popular.sample_size,
            reuse_cached_rows=self.cfg.popular.reuse_cached_rows,
        )

    async def movie(self, movie_id: int) -> EnrichedMovie:
        return await self.enricher.from_id(movie_id)

    async def trailer(self, query: str) -> str | None:
        return await self.videos.resolve(query)

    async def search(self, query: str) -> list[EnrichedMovie]:
        if self.router is None:
            raise RuntimeError("LLM search is not configured.")
        return await self.router.search(query, self.enricher)


def build_service(
    cfg: Config,
    http: httpx.AsyncClient,
    catalog: Catalog | None = None,
    videos: VideoLookup | None = None,
    router: QueryRouter | None = None,
) -> MovieService:
    if catalog is None:
        catalog = CatalogClient(
            http,
            cfg.catalog.base_url,
            cfg.catalog_api_key(),
            language=cfg.catalog.language,
            region=cfg.app.region,
        )
    if videos is None:
        videos = ScrapeVideoLookup(http, cfg.video.search_url, user_agent=cfg.app.user_agent)
    if router is None:
        router = _build_router(cfg, http)
    enricher = MovieEnricher(catalog, videos, trailer_suffix=cfg.video.trailer_suffix)
    return MovieService(
        cfg=cfg,
        catalog=catalog,
        videos=videos,
        enricher=enricher,
        sampler=Sampler(cfg.app.random_seed),
        router=router,
    )


def _build_router(cfg: Config, http: httpx.AsyncClient) -> QueryRouter | None:
    try:
        api_key = cfg.llm_api_key()
    except RuntimeError as exc:
        LOG.warning("LLM search disabled: %s", exc)
        return None
    return QueryRouter(http, cfg.llm.base_url, api_key, cfg.llm.model, max_titles=cfg.llm.max_titles)


@asynccontextmanager
async def open_service(cfg: Config) -> AsyncIterator[MovieService]:
    """One shared HTTP client per service; closed when the block exits."""
    timeout = httpx.Timeout(cfg.http.timeout_seconds)
    async with httpx.AsyncClient(timeout=timeout, follow_redirects=True) as http:
        yield build_service(cfg, http)
