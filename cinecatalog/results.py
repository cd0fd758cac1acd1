"""
Tagged result type returned by the v2 services.

A service call either succeeds with a value or fails with an ErrorKind and a
caller-safe message. Controllers decide the HTTP status from the tag.
"""

from dataclasses import dataclass
from typing import Any, Union

from cinecatalog.errors import ErrorKind, status_for


@dataclass(frozen=True)
class Success:
    """Successful outcome carrying an optional value."""
    value: Any = None

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Failure:
    """Failed outcome with its classification and message."""
    kind: ErrorKind
    message: str

    @property
    def ok(self) -> bool:
        return False

    @property
    def status_code(self) -> int:
        return status_for(self.kind)


ServiceResult = Union[Success, Failure]


def ok(value: Any = None) -> Success:
    return Success(value)


def invalid(message: str) -> Failure:
    return Failure(ErrorKind.VALIDATION, message)


def not_found(message: str) -> Failure:
    return Failure(ErrorKind.NOT_FOUND, message)


def internal(message: str) -> Failure:
    return Failure(ErrorKind.INTERNAL, message)
