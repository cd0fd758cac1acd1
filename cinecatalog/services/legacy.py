"""
v1 services.

The first API version predates the tagged results: these services return
plain values and raise CatalogError subclasses, which the v1 controllers
translate into status codes.
"""

from typing import Any, Dict, List, Mapping, Tuple

from pydantic import ValidationError
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import selectinload

from cinecatalog.errors import EntityNotFoundError, InvalidInputError, PersistenceError
from cinecatalog.logging_config import get_logger
from cinecatalog.logging_metrics import log_entity_change, track_query
from cinecatalog.models import Director, Genre, Movie
from cinecatalog.query import (
    SORT_COLUMNS,
    QueryParameterError,
    parse_pagination,
    parse_sort_direction,
)
from cinecatalog.schemas import (
    MoviePatch,
    NamedEntityCreate,
    NamedEntityPatch,
    first_error_message,
    wants_association,
)
from cinecatalog.services.base import coerce_id, resolve_ids

logger = get_logger(__name__)

LEGACY_RELATIONS = ("genres",)


def _require_id(value: Any) -> int:
    entity_id = coerce_id(value)
    if entity_id is None:
        raise InvalidInputError("Invalid id parameter")
    return entity_id


def _parse_genre_list(value: str) -> List[int]:
    ids = []
    for part in str(value).split(","):
        genre_id = coerce_id(part)
        if genre_id is None:
            raise InvalidInputError("Invalid genre parameter")
        ids.append(genre_id)
    return ids


class LegacyMovieService:
    """Movie operations for /api/v1."""

    def __init__(self, session):
        self.session = session

    def _fail(self, event: str, message: str, **context):
        self.session.rollback()
        logger.error(event, exc_info=True, **context)
        return PersistenceError(message)

    def list_movies(self, query: Mapping[str, Any]) -> Tuple[int, List[Dict[str, Any]]]:
        """
        List movies filtered by title substring and/or genre ids.

        Args:
            query: Request args with optional title, genre ("1,2"), page,
                limit, sort and order

        Returns:
            (count, movies) where count ignores pagination
        """
        try:
            page, limit = parse_pagination(query.get("page", 1), query.get("limit", 10))
            order = parse_sort_direction(query.get("order", "DESC"))
        except QueryParameterError as e:
            raise InvalidInputError(e.message)

        sort = query.get("sort", "createdAt")
        if sort not in SORT_COLUMNS:
            raise InvalidInputError("Invalid sort field")

        conditions = []
        title = query.get("title")
        if title:
            conditions.append(Movie.title.icontains(title, autoescape=True))
        genre = query.get("genre")
        if genre:
            conditions.append(Movie.genres.any(Genre.id.in_(_parse_genre_list(genre))))

        column = SORT_COLUMNS[sort]
        ordering = column.desc() if order == "DESC" else column.asc()

        try:
            with track_query("legacy_movie_listing", page=page, limit=limit):
                count = self.session.scalar(select(func.count(Movie.id)).where(*conditions)) or 0
                rows = self.session.scalars(
                    select(Movie)
                    .where(*conditions)
                    .options(selectinload(Movie.genres))
                    .order_by(ordering, Movie.id.asc())
                    .limit(limit)
                    .offset((page - 1) * limit)
                ).all()
        except SQLAlchemyError:
            raise self._fail("legacy_movie_listing_failed", "Failed to fetch movies")

        return count, [movie.to_dict(include=LEGACY_RELATIONS) for movie in rows]

    def _get_row(self, movie_id: int) -> Movie:
        try:
            movie = self.session.get(Movie, movie_id)
        except SQLAlchemyError:
            raise self._fail("legacy_movie_fetch_failed", "Failed to fetch movie", movie_id=movie_id)
        if movie is None:
            raise EntityNotFoundError("Movie not found")
        return movie

    def get_movie(self, movie_id: Any) -> Dict[str, Any]:
        return self._get_row(_require_id(movie_id)).to_dict(include=LEGACY_RELATIONS)

    def _validate(self, data: Any) -> MoviePatch:
        if not isinstance(data, Mapping):
            raise InvalidInputError("Invalid request body")
        try:
            patch = MoviePatch.model_validate(data)
        except ValidationError as e:
            raise InvalidInputError(first_error_message(e))
        if patch.director_id is not None and self.session.get(Director, patch.director_id) is None:
            raise EntityNotFoundError("Director not found")
        return patch

    def create_movie(self, data: Mapping[str, Any]) -> Dict[str, Any]:
        """Create a movie; the director is optional in v1."""
        patch = self._validate(data)

        genres = None
        if wants_association(patch.genre_ids):
            genres = resolve_ids(self.session, Genre, patch.genre_ids)
            if genres is None:
                raise EntityNotFoundError("Genre not found")

        try:
            movie = Movie(**patch.column_values())
            if genres is not None:
                movie.genres = genres
            self.session.add(movie)
            self.session.commit()
        except SQLAlchemyError:
            raise self._fail("legacy_movie_create_failed", "Failed to create movie")

        log_entity_change("movie", "create", movie.id, api_version="v1")
        return movie.to_dict(include=LEGACY_RELATIONS)

    def update_movie(self, movie_id: Any, data: Mapping[str, Any]) -> Dict[str, Any]:
        """Apply the allow-listed columns of a partial update."""
        movie = self._get_row(_require_id(movie_id))
        patch = self._validate(data)

        try:
            for name, value in patch.column_values().items():
                setattr(movie, name, value)
            self.session.commit()
        except SQLAlchemyError:
            raise self._fail("legacy_movie_update_failed", "Failed to update movie", movie_id=movie.id)

        log_entity_change("movie", "update", movie.id, api_version="v1")
        return movie.to_dict(include=LEGACY_RELATIONS)

    def delete_movie(self, movie_id: Any) -> None:
        movie = self._get_row(_require_id(movie_id))
        try:
            self.session.delete(movie)
            self.session.commit()
        except SQLAlchemyError:
            raise self._fail("legacy_movie_delete_failed", "Failed to delete movie", movie_id=movie.id)
        log_entity_change("movie", "delete", movie.id, api_version="v1")


class LegacyGenreService:
    """Genre operations for /api/v1."""

    def __init__(self, session):
        self.session = session

    def _get_row(self, genre_id: Any) -> Genre:
        genre_id = _require_id(genre_id)
        try:
            genre = self.session.get(Genre, genre_id)
        except SQLAlchemyError:
            self.session.rollback()
            logger.error("legacy_genre_fetch_failed", genre_id=genre_id, exc_info=True)
            raise PersistenceError("Failed to fetch genre")
        if genre is None:
            raise EntityNotFoundError("Genre not found")
        return genre

    def create_genre(self, data: Mapping[str, Any]) -> Dict[str, Any]:
        if not isinstance(data, Mapping):
            raise InvalidInputError("Invalid request body")
        try:
            payload = NamedEntityCreate.model_validate(data)
        except ValidationError as e:
            raise InvalidInputError(first_error_message(e))
        try:
            genre = Genre(name=payload.name)
            self.session.add(genre)
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            logger.error("legacy_genre_create_failed", exc_info=True)
            raise PersistenceError("Failed to create genre")
        log_entity_change("genre", "create", genre.id, api_version="v1")
        return genre.to_dict()

    def get_genres(self) -> List[Dict[str, Any]]:
        try:
            rows = self.session.scalars(select(Genre).order_by(Genre.id.asc())).all()
        except SQLAlchemyError:
            self.session.rollback()
            logger.error("legacy_genre_listing_failed", exc_info=True)
            raise PersistenceError("Failed to fetch genres")
        return [genre.to_dict() for genre in rows]

    def get_genre(self, genre_id: Any) -> Dict[str, Any]:
        return self._get_row(genre_id).to_dict()

    def update_genre(self, genre_id: Any, data: Mapping[str, Any]) -> Dict[str, Any]:
        genre = self._get_row(genre_id)
        if not isinstance(data, Mapping):
            raise InvalidInputError("Invalid request body")
        try:
            patch = NamedEntityPatch.model_validate(data)
        except ValidationError as e:
            raise InvalidInputError(first_error_message(e))
        try:
            if patch.name is not None:
                genre.name = patch.name
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            logger.error("legacy_genre_update_failed", genre_id=genre.id, exc_info=True)
            raise PersistenceError("Failed to update genre")
        log_entity_change("genre", "update", genre.id, api_version="v1")
        return genre.to_dict()

    def delete_genre(self, genre_id: Any) -> None:
        genre = self._get_row(genre_id)
        try:
            self.session.delete(genre)
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            logger.error("legacy_genre_delete_failed", genre_id=genre.id, exc_info=True)
            raise PersistenceError("Failed to delete genre")
        log_entity_change("genre", "delete", genre.id, api_version="v1")
