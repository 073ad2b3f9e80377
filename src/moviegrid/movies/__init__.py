"""Movie aggregation pipeline."""

from moviegrid.movies.enrich import MovieEnricher
from moviegrid.movies.landing import build_landing_page
from moviegrid.movies.popular import random_popular_movies

__all__ = ["MovieEnricher", "build_landing_page", "random_popular_movies"]
