"""
Flask hooks for request logging and HTTP metrics.

Each request gets a request_id (see logging_context), its method and route
bound into the log context, a request_completed line with the duration, and a
sample in the HTTP Prometheus metrics. Metrics are labelled with the URL rule
(e.g. /api/v2/movies/<movie_id>) so ids never become label values.
"""

import time

from flask import Flask, g, request

from cinecatalog.logging_config import get_logger
from cinecatalog.logging_context import (
    REQUEST_ID_HEADER,
    bind_context,
    clear_context,
    set_request_id,
)
from cinecatalog.metrics import track_http_request

logger = get_logger(__name__)

# Probes are logged at debug so they don't drown the request log
QUIET_PATHS = {"/health", "/metrics"}


def _route() -> str:
    return request.url_rule.rule if request.url_rule else "unmatched"


def _log_for_path(level: str):
    if request.path in QUIET_PATHS and level == "info":
        return logger.debug
    return getattr(logger, level)


def _start_request():
    g.request_id = set_request_id(request.headers.get(REQUEST_ID_HEADER))
    g.request_started_at = time.perf_counter()
    bind_context(method=request.method, route=_route())

    _log_for_path("info")(
        "request_started",
        path=request.path,
        query=request.query_string.decode("utf-8", "replace") or None,
        remote_addr=request.remote_addr,
    )


def _finish_request(response):
    started = g.get("request_started_at")
    duration = time.perf_counter() - started if started is not None else None
    status = response.status_code

    track_http_request(request.method, _route(), status, duration)

    _log_for_path("warning" if status >= 500 else "info")(
        "request_completed",
        path=request.path,
        status_code=status,
        duration_ms=round(duration * 1000, 2) if duration is not None else None,
    )

    request_id = g.get("request_id")
    if request_id:
        response.headers[REQUEST_ID_HEADER] = request_id
    return response


def _end_request(exception=None):
    if exception is not None:
        logger.error("request_failed", path=request.path, error=str(exception), exc_info=exception)
    clear_context()


def init_logging_middleware(app: Flask):
    """
    Register the request logging hooks on app.

    Args:
        app: Flask application instance
    """
    app.before_request(_start_request)
    app.after_request(_finish_request)
    app.teardown_request(_end_request)
