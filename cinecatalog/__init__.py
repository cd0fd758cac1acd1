"""
CineCatalog - Movie Catalog REST API

A Flask-based service for managing movies, directors, actors and genres,
exposed as a minimal v1 API and a full-featured v2 API.
"""

__version__ = "2.0.0"

from .errors import (
    CatalogError,
    EntityNotFoundError,
    ErrorKind,
    InvalidInputError,
    PersistenceError,
)
from .results import Failure, ServiceResult, Success

__all__ = [
    "CatalogError",
    "EntityNotFoundError",
    "ErrorKind",
    "InvalidInputError",
    "PersistenceError",
    "Failure",
    "ServiceResult",
    "Success",
]
