"""
Request-scoped log context.

Every log line emitted while a request is handled carries its request_id.
The id is taken from the X-Request-ID header when the caller sends a usable
one, otherwise a fresh UUID is minted. Values live in contextvars, so
concurrent requests never see each other's ids.
"""

import re
import uuid
from contextvars import ContextVar
from typing import Optional

import structlog

REQUEST_ID_HEADER = "X-Request-ID"
MAX_REQUEST_ID_LENGTH = 128

# Header values are echoed into logs and responses, so keep them to a safe alphabet
_REQUEST_ID_PATTERN = re.compile(r"^[A-Za-z0-9._:\-]+$")

request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)


def generate_request_id() -> str:
    return str(uuid.uuid4())


def accept_request_id(candidate: Optional[str]) -> Optional[str]:
    """
    Return an incoming request id if it can be reused as-is.

    Args:
        candidate: Raw header value (may be None)

    Returns:
        The id, or None when it is empty, too long or has unexpected characters
    """
    if not candidate or len(candidate) > MAX_REQUEST_ID_LENGTH:
        return None
    if not _REQUEST_ID_PATTERN.match(candidate):
        return None
    return candidate


def set_request_id(request_id: Optional[str] = None) -> str:
    """
    Make request_id the current one, minting a new id if it is unusable.

    Returns:
        The request ID that was bound
    """
    request_id = accept_request_id(request_id) or generate_request_id()
    request_id_var.set(request_id)
    structlog.contextvars.bind_contextvars(request_id=request_id)
    return request_id


def get_request_id() -> Optional[str]:
    return request_id_var.get()


def bind_context(**values):
    """Attach values to every log line for the rest of the request."""
    structlog.contextvars.bind_contextvars(**values)


def clear_context():
    request_id_var.set(None)
    structlog.contextvars.clear_contextvars()
