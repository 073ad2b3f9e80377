from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import requests

from moviegrid.config import Config, IngestConfig
from moviegrid.db import repo
from moviegrid.db.conn import ensure_db, open_store
from moviegrid.util.cache import FileCache
from moviegrid.util.logging import get_logger
from moviegrid.util.ratelimit import sleep_seconds
from moviegrid.util.retry import retry

LOG = get_logger(__name__)

# TMDB refuses page numbers above this
MAX_API_PAGE = 500


@dataclass(frozen=True)
class FetchResult:
    url: str
    payload: dict[str, Any]
    from_cache: bool


@dataclass(frozen=True)
class IngestResult:
    pages: int
    movies: int
    total_in_store: int


class PopularPageClient:
    def __init__(
        self,
        base_url: str,
        api_key: str,
        user_agent: str,
        ingest_config: IngestConfig,
        cache_dir: Path,
        language: str = "en-US",
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.language = language
        self.ingest = ingest_config
        self.cache = FileCache(cache_dir)
        self.session = requests.Session()
        self.session.headers.update({"User-Agent": user_agent, "Accept": "application/json"})

    def fetch_page(self, page: int, refresh: bool = False) -> FetchResult:
        url = f"{self.base_url}/movie/popular"
        entry = self.cache.entry(f"popular_{self.language}_{page}.json")

        if not refresh and entry.is_fresh(self.ingest.cache_ttl_days):
            LOG.info("Cache hit: popular page %s", page)
            return FetchResult(url=url, payload=entry.read_json(), from_cache=True)

        params = {"api_key": self.api_key, "language": self.language, "page": page}

        def _fetch_once() -> dict[str, Any]:
            LOG.info("Fetching popular page %s", page)
            resp = self.session.get(url, params=params, timeout=30)
            resp.raise_for_status()
            return resp.json()

        def _on_error(exc: Exception, attempt: int) -> None:
            LOG.warning("Fetch of page %s failed (attempt %s): %s", page, attempt, exc)

        payload = retry(
            _fetch_once,
            attempts=self.ingest.max_retries,
            delay_seconds=self.ingest.rate_limit_seconds,
            on_error=_on_error,
        )
        entry.write_json(payload)
        return FetchResult(url=url, payload=payload, from_cache=False)


def ingest_popular(
    cfg: Config,
    pages: int | None = None,
    refresh: bool = False,
    client: PopularPageClient | None = None,
) -> IngestResult:
    """Fill the local ``movies`` table from the catalog's popular listing."""
    ensure_db(cfg.database_path)
    if client is None:
        client = PopularPageClient(
            cfg.catalog.base_url,
            cfg.catalog_api_key(),
            cfg.app.user_agent,
            cfg.ingest,
            Path(cfg.app.cache_dir) / "popular",
            language=cfg.catalog.language,
        )
    max_pages = min(pages or cfg.ingest.max_pages, MAX_API_PAGE)

    fetched = 0
    stored = 0
    page = 1
    total_pages = max_pages
    with open_store(cfg.database_path) as conn:
        while page <= min(max_pages, total_pages):
            result = client.fetch_page(page, refresh=refresh)
            total_pages = int(result.payload.get("total_pages") or page)
            stored += repo.upsert_movies(conn, result.payload.get("results") or [])
            conn.commit()
            fetched += 1
            page += 1
            if not result.from_cache:
                sleep_seconds(cfg.ingest.rate_limit_seconds)
        total = repo.count_movies(conn)

    LOG.info("Ingested %s movies from %s pages", stored, fetched)
    return IngestResult(pages=fetched, movies=stored, total_in_store=total)
