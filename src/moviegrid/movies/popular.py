from __future__ import annotations

from moviegrid.catalog.models import EnrichedMovie
from moviegrid.db import repo
from moviegrid.db.conn import open_store
from moviegrid.movies.enrich import MovieEnricher
from moviegrid.util.concurrency import gather_all
from moviegrid.util.logging import get_logger
from moviegrid.util.sampling import Sampler

LOG = get_logger(__name__)

POOL_SIZE = 1000
SAMPLE_SIZE = 10


async def random_popular_movies(
    database_path: str,
    enricher: MovieEnricher,
    sampler: Sampler,
    pool_size: int = POOL_SIZE,
    sample_size: int = SAMPLE_SIZE,
    reuse_cached_rows: bool = False,
) -> list[EnrichedMovie]:
    """Sample ``sample_size`` titles from the ``pool_size`` most popular rows.

    By default each pick is re-fetched from the catalog by id; with
    ``reuse_cached_rows`` the stored fields are enriched directly.
    """
    with open_store(database_path) as conn:
        rows = repo.select_top_popular(conn, pool_size)
    picks = sampler.sample(rows, sample_size)
    LOG.info("Popular sample: %s of %s rows", len(picks), len(rows))

    if reuse_cached_rows:
        return await enricher.enrich_all([repo.record_from_row(row) for row in picks])
    return await gather_all(enricher.from_id(int(row["id"])) for row in picks)
