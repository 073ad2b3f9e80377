from __future__ import annotations


class MovieGridError(Exception):
    """Base class for failures surfaced by the aggregation pipeline."""


class MovieNotFoundError(MovieGridError):
    def __init__(self, query: int | str) -> None:
        super().__init__(f"Movie not found: {query!r}")
        self.query = query


class UpstreamError(MovieGridError):
    """A catalog, scrape or LLM call failed or timed out."""


class StoreError(MovieGridError):
    """The local popularity store could not be opened or queried."""


class EnrichmentError(MovieGridError):
    def __init__(self, movie_id: int, cause: BaseException | None = None) -> None:
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"Failed to enrich movie {movie_id}{detail}")
        self.movie_id = movie_id
