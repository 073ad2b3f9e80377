from __future__ import annotations

from typing import Any

import httpx

from moviegrid.catalog.models import CatalogRecord, StreamingProvider
from moviegrid.catalog.providers import pick_streaming_provider, region_offers
from moviegrid.errors import MovieNotFoundError, UpstreamError
from moviegrid.util.logging import get_logger

LOG = get_logger(__name__)


class CatalogClient:
    """Thin async wrapper over the TMDB v3 API."""

    def __init__(
        self,
        http: httpx.AsyncClient,
        base_url: str,
        api_key: str,
        language: str = "en-US",
        region: str = "US",
    ) -> None:
        self.http = http
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.language = language
        self.region = region

    async def get_movie_by_id(self, movie_id: int) -> CatalogRecord:
        payload = await self._get_json(f"/movie/{movie_id}", not_found=movie_id)
        return CatalogRecord.from_payload(payload)

    async def get_movie_by_title(self, title: str) -> CatalogRecord:
        payload = await self._get_json("/search/movie", params={"query": title})
        results = payload.get("results") or []
        if not results:
            raise MovieNotFoundError(title)
        return CatalogRecord.from_payload(results[0])

    async def get_trending_movies(self) -> list[CatalogRecord]:
        payload = await self._get_json("/trending/movie/week")
        return _records(payload)

    async def get_top_rated_movies(self) -> list[CatalogRecord]:
        payload = await self._get_json("/movie/top_rated")
        return _records(payload)

    async def get_streaming_provider(self, movie_id: int) -> StreamingProvider | None:
        payload = await self._get_json(f"/movie/{movie_id}/watch/providers")
        return pick_streaming_provider(region_offers(payload, self.region))

    async def _get_json(
        self,
        path: str,
        params: dict[str, Any] | None = None,
        not_found: int | str | None = None,
    ) -> dict[str, Any]:
        url = f"{self.base_url}{path}"
        query = {"api_key": self.api_key, "language": self.language, **(params or {})}
        LOG.debug("Catalog GET %s", path)
        try:
            resp = await self.http.get(url, params=query)
        except httpx.HTTPError as exc:
            raise UpstreamError(f"Catalog request failed for {path}: {exc}") from exc
        if resp.status_code == 404 and not_found is not None:
            raise MovieNotFoundError(not_found)
        if resp.is_error:
            raise UpstreamError(f"Catalog returned {resp.status_code} for {path}")
        try:
            payload = resp.json()
        except ValueError as exc:
            raise UpstreamError(f"Catalog returned invalid JSON for {path}") from exc
        if not isinstance(payload, dict):
            raise UpstreamError(f"Unexpected catalog payload for {path}")
        return payload


def _records(payload: dict[str, Any]) -> list[CatalogRecord]:
    records = []
    for item in payload.get("results") or []:
        if item.get("id") is None:
            continue
        records.append(CatalogRecord.from_payload(item))
    return records
