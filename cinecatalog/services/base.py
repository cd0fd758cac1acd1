"""
Shared plumbing for the catalog services.
"""

from typing import Any, List, Optional, Sequence

from sqlalchemy import select

from cinecatalog.logging_config import get_logger
from cinecatalog.query import parse_positive_int
from cinecatalog.results import Failure, internal

logger = get_logger(__name__)


def coerce_id(value: Any) -> Optional[int]:
    """
    Return value as a positive integer id, or None.

    Accepts ints and ASCII digit strings (path parameters arrive as strings)
    up to MAX_INTEGER; anything larger cannot be a stored id.
    """
    return parse_positive_int(value)


def resolve_ids(session, model, ids: Sequence[int]) -> Optional[List[Any]]:
    """
    Load the rows for ids, preserving the caller's order.

    Returns:
        The rows, or None when any id does not exist
    """
    wanted = list(dict.fromkeys(ids))
    rows = session.scalars(select(model).where(model.id.in_(wanted))).all()
    by_id = {row.id: row for row in rows}
    if len(by_id) != len(wanted):
        return None
    return [by_id[i] for i in wanted]


class BaseService:
    """A service bound to one SQLAlchemy session."""

    entity = "entity"

    def __init__(self, session):
        self.session = session

    def _internal(self, event: str, message: str, **context) -> Failure:
        """Roll back, log the active exception, and hide it behind message."""
        self.session.rollback()
        logger.error(event, entity=self.entity, exc_info=True, **context)
        return internal(message)
