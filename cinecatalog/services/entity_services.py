"""
Director, actor and genre services (v2).

The three entities share one shape (an id and a name, linked to movies), so
the CRUD logic lives in NamedEntityService and each subclass only names its
model and tweaks what differs.
"""

from typing import Any, Dict, Mapping

from pydantic import ValidationError
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from cinecatalog.logging_config import get_logger
from cinecatalog.logging_metrics import log_entity_change, track_query
from cinecatalog.models import Actor, Director, Genre
from cinecatalog.query import QueryParameterError, parse_pagination, total_pages
from cinecatalog.results import ServiceResult, invalid, not_found, ok
from cinecatalog.schemas import NamedEntityCreate, NamedEntityPatch, first_error_message
from cinecatalog.services.base import BaseService, coerce_id

logger = get_logger(__name__)

ENTITY_SORT_FIELDS = ("id", "name")
DEFAULT_ENTITY_LIMIT = 20


class NamedEntityService(BaseService):
    """CRUD for an entity with an id, a name and a movies relation."""

    model = None
    label = "Entity"
    plural = "entities"

    def _serialize(self, row) -> Dict[str, Any]:
        return row.to_dict()

    def _serialize_detail(self, row) -> Dict[str, Any]:
        return self._serialize(row)

    def _find(self, entity_id: int):
        return self.session.get(self.model, entity_id)

    def _not_found(self):
        return not_found(f"{self.label} not found")

    def list_page(self, page: Any = 1, limit: Any = DEFAULT_ENTITY_LIMIT,
                  sort_by: Any = "id", sort: Any = "asc") -> ServiceResult:
        """
        Page through the entity table.

        Args:
            page: 1-based page number
            limit: Page size
            sort_by: "id" or "name"
            sort: "desc" (any case) for descending, anything else ascending

        Returns:
            Success with {total, page, totalPages, <plural>}
        """
        try:
            page, limit = parse_pagination(page, limit)
        except QueryParameterError as e:
            return invalid(e.message)

        if sort_by not in ENTITY_SORT_FIELDS:
            return invalid("Invalid sortBy field")
        column = getattr(self.model, sort_by)
        descending = isinstance(sort, str) and sort.lower() == "desc"
        ordering = column.desc() if descending else column.asc()

        try:
            with track_query(f"{self.entity}_listing", page=page, limit=limit):
                total = self.session.scalar(select(func.count(self.model.id))) or 0
                rows = self.session.scalars(
                    select(self.model)
                    .order_by(ordering, self.model.id.asc())
                    .limit(limit)
                    .offset((page - 1) * limit)
                ).all()
        except SQLAlchemyError:
            return self._internal(f"{self.entity}_listing_failed", f"Failed to fetch {self.plural}")

        return ok({
            "total": total,
            "page": page,
            "totalPages": total_pages(total, limit),
            self.plural: [self._serialize(row) for row in rows],
        })

    def get(self, entity_id: Any) -> ServiceResult:
        entity_id = coerce_id(entity_id)
        if entity_id is None:
            return invalid("Invalid id parameter")
        try:
            row = self._find(entity_id)
            if row is None:
                return self._not_found()
            return ok(self._serialize_detail(row))
        except SQLAlchemyError:
            return self._internal(f"{self.entity}_fetch_failed", f"Failed to fetch {self.entity}")

    def _check_name(self, name: str, exclude_id: Any = None):
        """Hook for name rules; returns a Failure or None."""
        return None

    def create(self, data: Mapping[str, Any]) -> ServiceResult:
        if not isinstance(data, Mapping):
            return invalid("Invalid request body")
        try:
            payload = NamedEntityCreate.model_validate(data)
        except ValidationError as e:
            return invalid(first_error_message(e))

        try:
            failure = self._check_name(payload.name)
            if failure is not None:
                return failure
            row = self.model(name=payload.name)
            self.session.add(row)
            self.session.commit()
        except IntegrityError:
            self.session.rollback()
            return invalid(f"{self.label} name already exists")
        except SQLAlchemyError:
            return self._internal(f"{self.entity}_create_failed", f"Failed to create {self.entity}")

        log_entity_change(self.entity, "create", row.id)
        return ok(self._serialize(row))

    def update(self, entity_id: Any, data: Mapping[str, Any]) -> ServiceResult:
        """Rename an entity. A missing or blank name keeps the current one."""
        entity_id = coerce_id(entity_id)
        if entity_id is None:
            return invalid("Invalid id parameter")
        if not isinstance(data, Mapping):
            return invalid("Invalid request body")

        try:
            row = self._find(entity_id)
            if row is None:
                return self._not_found()

            try:
                patch = NamedEntityPatch.model_validate(data)
            except ValidationError as e:
                return invalid(first_error_message(e))

            if patch.name is not None and patch.name != row.name:
                failure = self._check_name(patch.name, exclude_id=entity_id)
                if failure is not None:
                    return failure
                row.name = patch.name
            self.session.commit()
        except IntegrityError:
            self.session.rollback()
            return invalid(f"{self.label} name already exists")
        except SQLAlchemyError:
            return self._internal(f"{self.entity}_update_failed", f"Failed to update {self.entity}")

        log_entity_change(self.entity, "update", entity_id)
        return ok(self._serialize(row))

    def delete(self, entity_id: Any) -> ServiceResult:
        entity_id = coerce_id(entity_id)
        if entity_id is None:
            return invalid("Invalid id parameter")

        try:
            row = self._find(entity_id)
            if row is None:
                return self._not_found()
            self.session.delete(row)
            self.session.commit()
        except SQLAlchemyError:
            return self._internal(f"{self.entity}_delete_failed", f"Failed to delete {self.entity}")

        log_entity_change(self.entity, "delete", entity_id)
        return ok()

    def movies_of(self, entity_id: Any) -> ServiceResult:
        """
        Movies linked to an entity.

        Returns:
            Success with {<entity>: {...}, movies: [{id, title, overview, year}]}
        """
        entity_id = coerce_id(entity_id)
        if entity_id is None:
            return invalid("Invalid id parameter")

        try:
            row = self._find(entity_id)
            if row is None:
                return self._not_found()
            return ok({
                self.entity: row.to_dict(),
                "movies": [movie.to_brief() for movie in row.movies],
            })
        except SQLAlchemyError:
            return self._internal(
                f"{self.entity}_movies_failed", f"Failed to fetch movies by {self.entity}"
            )


class DirectorService(NamedEntityService):
    model = Director
    entity = "director"
    label = "Director"
    plural = "directors"

    def _check_name(self, name, exclude_id=None):
        statement = select(Director.id).where(Director.name == name)
        if exclude_id is not None:
            statement = statement.where(Director.id != exclude_id)
        if self.session.scalar(statement) is not None:
            return invalid("Director name already exists")
        return None


class ActorService(NamedEntityService):
    model = Actor
    entity = "actor"
    label = "Actor"
    plural = "actors"

    def _serialize_detail(self, row):
        return row.to_dict(include_movies=True)


class GenreService(NamedEntityService):
    model = Genre
    entity = "genre"
    label = "Genre"
    plural = "genres"

    def list_genres(self) -> ServiceResult:
        """All genres, ordered by name."""
        try:
            with track_query("genre_listing"):
                rows = self.session.scalars(select(Genre).order_by(Genre.name.asc(), Genre.id.asc())).all()
        except SQLAlchemyError:
            return self._internal("genre_listing_failed", "Failed to fetch genres")
        return ok({"genres": [row.to_dict() for row in rows]})
