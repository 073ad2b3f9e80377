from __future__ import annotations

from typing import Protocol

from moviegrid.catalog.models import CatalogRecord, EnrichedMovie, StreamingProvider
from moviegrid.errors import EnrichmentError
from moviegrid.util.concurrency import gather_all
from moviegrid.util.logging import get_logger
from moviegrid.video.lookup import VideoLookup

LOG = get_logger(__name__)


class Catalog(Protocol):
    async def get_movie_by_id(self, movie_id: int) -> CatalogRecord: ...

    async def get_movie_by_title(self, title: str) -> CatalogRecord: ...

    async def get_trending_movies(self) -> list[CatalogRecord]: ...

    async def get_top_rated_movies(self) -> list[CatalogRecord]: ...

    async def get_streaming_provider(self, movie_id: int) -> StreamingProvider | None: ...


class MovieEnricher:
    """Turns catalog records into display-ready movies.

    Each enrichment issues two outbound calls (trailer search and streaming
    provider lookup) concurrently. Nothing is cached.
    """

    def __init__(
        self,
        catalog: Catalog,
        videos: VideoLookup,
        trailer_suffix: str = "trailer",
    ) -> None:
        self.catalog = catalog
        self.videos = videos
        self.trailer_suffix = trailer_suffix

    def trailer_query(self, record: CatalogRecord) -> str:
        return f"{record.title} {self.trailer_suffix}".strip()

    async def enrich(self, record: CatalogRecord) -> EnrichedMovie:
        try:
            video_id, provider = await gather_all(
                [
                    self.videos.resolve(self.trailer_query(record)),
                    self.catalog.get_streaming_provider(record.id),
                ]
            )
        except Exception as exc:
            LOG.warning("Enrichment failed for %s (%s): %s", record.id, record.title, exc)
            raise EnrichmentError(record.id, exc) from exc
        return EnrichedMovie.from_record(record, video_id, provider)

    async def from_id(self, movie_id: int) -> EnrichedMovie:
        record = await self.catalog.get_movie_by_id(movie_id)
        return await self.enrich(record)

    async def from_title(self, title: str) -> EnrichedMovie:
        record = await self.catalog.get_movie_by_title(title)
        return await self.enrich(record)

    async def enrich_all(self, records: list[CatalogRecord]) -> list[EnrichedMovie]:
        return await gather_all(self.enrich(record) for record in records)
