"""
Error taxonomy for the catalog services.

Error Taxonomy:
- InvalidInputError: Malformed or out-of-range input (400)
- EntityNotFoundError: A requested or referenced entity does not exist (404)
- PersistenceError: The database failed underneath us (500)

The v1 services raise these directly. The v2 services return a Failure
result carrying the same ErrorKind instead.
"""

from enum import Enum
from typing import Optional


class ErrorKind(Enum):
    """Classification of catalog errors."""
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    INTERNAL = "internal"


HTTP_STATUS = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.INTERNAL: 500,
}


def status_for(kind: ErrorKind) -> int:
    """Return the HTTP status code an error kind maps onto."""
    return HTTP_STATUS.get(kind, 500)


class CatalogError(Exception):
    """Base exception for all catalog errors."""

    def __init__(self, message: str, kind: ErrorKind = ErrorKind.INTERNAL,
                 original_error: Optional[Exception] = None):
        self.message = message
        self.kind = kind
        self.original_error = original_error
        super().__init__(message)

    @property
    def status_code(self) -> int:
        return status_for(self.kind)


class InvalidInputError(CatalogError):
    """Input failed validation."""

    def __init__(self, message: str):
        super().__init__(message, ErrorKind.VALIDATION)


class EntityNotFoundError(CatalogError):
    """Entity not found error."""

    def __init__(self, message: str):
        super().__init__(message, ErrorKind.NOT_FOUND)


class PersistenceError(CatalogError):
    """Database operation failed."""

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        super().__init__(message, ErrorKind.INTERNAL, original_error)
