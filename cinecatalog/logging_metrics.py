"""
Instrumentation helpers that pair structured logs with metrics.

This module provides utilities for tracking:
- Database query latencies
- Entity create/update/delete events
"""

import time
from contextlib import contextmanager
from typing import Optional
from cinecatalog.logging_config import get_logger
from cinecatalog.metrics import observe_query, track_entity_write

logger = get_logger(__name__)


@contextmanager
def track_query(query: str, **extra_context):
    """
    Context manager to track a database query.

    Args:
        query: Query name (e.g., "movie_listing", "director_listing")
        **extra_context: Additional context to log

    Yields:
        None

    Example:
        with track_query("movie_listing", page=1, limit=10):
            payload = run_movie_listing(session, params)
    """
    start_time = time.time()
    error = None

    logger.debug("query_started", query=query, **extra_context)

    try:
        yield
    except Exception as e:
        error = e
        raise
    finally:
        duration = time.time() - start_time
        observe_query(query, duration)

        if error:
            logger.error(
                "query_failed",
                query=query,
                duration_ms=round(duration * 1000, 2),
                error=str(error),
                **extra_context
            )
        else:
            logger.info(
                "query_completed",
                query=query,
                duration_ms=round(duration * 1000, 2),
                **extra_context
            )


def log_entity_change(
    entity: str,
    action: str,
    entity_id: Optional[int] = None,
    **extra_context
):
    """
    Log a committed entity write and count it.

    Args:
        entity: Entity name ("movie", "director", "actor", "genre")
        action: "create", "update" or "delete"
        entity_id: Primary key of the affected row
        **extra_context: Additional context to log
    """
    track_entity_write(entity, action)
    logger.info(
        f"{entity}_{action}d",
        entity=entity,
        action=action,
        entity_id=entity_id,
        **extra_context
    )
