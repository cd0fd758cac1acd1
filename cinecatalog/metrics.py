"""
Prometheus metrics for CineCatalog.

This module provides metrics collection for monitoring HTTP traffic, movie
listing outcomes, database query latency and entity writes.
"""

from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST


# API Request Metrics
http_requests_total = Counter(
    'cinecatalog_http_requests_total',
    'Total number of HTTP requests',
    ['method', 'endpoint', 'status']
)

http_request_duration_seconds = Histogram(
    'cinecatalog_http_request_duration_seconds',
    'HTTP request duration in seconds',
    ['method', 'endpoint']
)

# Movie Listing Metrics
movie_listings_total = Counter(
    'cinecatalog_movie_listings_total',
    'Total number of movie listing requests',
    ['result']  # ok, invalid, error
)

# Database Query Metrics
query_duration_seconds = Histogram(
    'cinecatalog_query_duration_seconds',
    'Database query duration in seconds',
    ['query']
)

# Entity Write Metrics
entity_writes_total = Counter(
    'cinecatalog_entity_writes_total',
    'Total number of committed entity writes',
    ['entity', 'action']  # action: create, update, delete
)


def track_http_request(method, endpoint, status, duration=None):
    """
    Record one HTTP request.

    Args:
        method: HTTP method
        endpoint: URL rule that matched (not the raw path, to bound cardinality)
        status: Response status code
        duration: Duration in seconds (optional)
    """
    http_requests_total.labels(method=method, endpoint=endpoint, status=status).inc()
    if duration is not None:
        http_request_duration_seconds.labels(method=method, endpoint=endpoint).observe(duration)


def track_movie_listing(result):
    """
    Record a movie listing outcome.

    Args:
        result: One of 'ok', 'invalid', 'error'
    """
    movie_listings_total.labels(result=result).inc()


def observe_query(query, duration):
    """Record how long a named query took, in seconds."""
    query_duration_seconds.labels(query=query).observe(duration)


def track_entity_write(entity, action):
    """
    Record a committed write.

    Args:
        entity: 'movie', 'director', 'actor' or 'genre'
        action: 'create', 'update' or 'delete'
    """
    entity_writes_total.labels(entity=entity, action=action).inc()


def get_metrics():
    """
    Generate Prometheus metrics in text format.

    Returns:
        Tuple of (metrics_text, content_type)
    """
    return generate_latest(), CONTENT_TYPE_LATEST
