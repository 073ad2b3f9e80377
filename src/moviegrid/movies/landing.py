from __future__ import annotations

from moviegrid.catalog.models import EnrichedMovie
from moviegrid.movies.enrich import Catalog, MovieEnricher
from moviegrid.util.concurrency import gather_all
from moviegrid.util.logging import get_logger
from moviegrid.util.sampling import Sampler

LOG = get_logger(__name__)

TRENDING_COUNT = 8
TOP_RATED_COUNT = 2


async def build_landing_page(
    catalog: Catalog,
    enricher: MovieEnricher,
    sampler: Sampler,
    trending_count: int = TRENDING_COUNT,
    top_rated_count: int = TOP_RATED_COUNT,
) -> list[EnrichedMovie]:
    """Random trending and top-rated picks, shuffled together and enriched.

    Any failed enrichment fails the whole page; no partial grid is returned.
    """
    trending, top_rated = await gather_all(
        [catalog.get_trending_movies(), catalog.get_top_rated_movies()]
    )
    picks = sampler.sample(trending, trending_count) + sampler.sample(top_rated, top_rated_count)
    LOG.info(
        "Landing page: %s trending of %s, %s top-rated of %s",
        min(trending_count, len(trending)),
        len(trending),
        min(top_rated_count, len(top_rated)),
        len(top_rated),
    )
    return await enricher.enrich_all(sampler.shuffled(picks))
