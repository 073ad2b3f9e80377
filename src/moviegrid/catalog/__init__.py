"""Movie catalog (TMDB) access."""

from moviegrid.catalog.client import CatalogClient
from moviegrid.catalog.models import CatalogRecord, EnrichedMovie, StreamingProvider

__all__ = [
    "CatalogClient",
    "CatalogRecord",
    "EnrichedMovie",
    "StreamingProvider",
]
