"""
Catalog services.

v2 services return Success/Failure results; v1 (legacy) services raise
CatalogError subclasses.
"""

from .movie_service import MovieService
from .entity_services import ActorService, DirectorService, GenreService, NamedEntityService
from .legacy import LegacyGenreService, LegacyMovieService

__all__ = [
    "MovieService",
    "DirectorService",
    "ActorService",
    "GenreService",
    "NamedEntityService",
    "LegacyMovieService",
    "LegacyGenreService",
]
