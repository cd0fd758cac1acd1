"""
Movie service (v2).

Listing goes through the query builder; single-movie operations validate the
payload, resolve referenced rows, and commit once so a movie and its
associations are written together or not at all.
"""

from typing import Any, Mapping

from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import joinedload, selectinload

from cinecatalog.logging_config import get_logger
from cinecatalog.logging_metrics import log_entity_change, track_query
from cinecatalog.metrics import track_movie_listing
from cinecatalog.models import Actor, Director, Genre, Movie
from cinecatalog.query import QueryParameterError, parse_movie_list_params, run_movie_listing
from cinecatalog.results import ServiceResult, invalid, not_found, ok
from cinecatalog.schemas import MovieCreate, MoviePatch, first_error_message, wants_association
from cinecatalog.services.base import BaseService, coerce_id, resolve_ids

logger = get_logger(__name__)


class MovieService(BaseService):
    entity = "movie"

    def list_movies(self, params: Mapping[str, Any]) -> ServiceResult:
        """
        List movies with pagination, filters, search and include flags.

        Args:
            params: Raw listing parameters (see query.parse_movie_list_params)

        Returns:
            Success with {total, page, totalPages, movies}, or a VALIDATION
            failure naming the first bad parameter.
        """
        try:
            list_params = parse_movie_list_params(params)
        except QueryParameterError as e:
            track_movie_listing("invalid")
            logger.info("movie_listing_rejected", reason=e.message)
            return invalid(e.message)

        try:
            with track_query(
                "movie_listing",
                page=list_params.page,
                limit=list_params.limit,
                sort=list_params.sort,
                order=list_params.order,
            ):
                payload = run_movie_listing(self.session, list_params)
        except SQLAlchemyError:
            track_movie_listing("error")
            return self._internal("movie_listing_failed", "Failed to fetch movies")

        track_movie_listing("ok")
        return ok(payload)

    def _load(self, movie_id: int):
        statement = (
            select(Movie)
            .where(Movie.id == movie_id)
            .options(
                joinedload(Movie.director),
                selectinload(Movie.genres),
                selectinload(Movie.actors),
            )
        )
        return self.session.scalars(statement).first()

    def get_movie(self, movie_id: Any) -> ServiceResult:
        movie_id = coerce_id(movie_id)
        if movie_id is None:
            return invalid("Invalid id parameter")

        try:
            movie = self._load(movie_id)
        except SQLAlchemyError:
            return self._internal("movie_fetch_failed", "Failed to fetch movie", movie_id=movie_id)

        if movie is None:
            return not_found("Movie not found")
        return ok(movie.to_dict())

    def _resolve_associations(self, payload: MoviePatch):
        """
        Load the genre and actor rows a payload asks for.

        Returns:
            (genres, actors, failure). A list is None when its association set
            should be left as it is.
        """
        genres = actors = None
        if wants_association(payload.genre_ids):
            genres = resolve_ids(self.session, Genre, payload.genre_ids)
            if genres is None:
                return None, None, not_found("Genre not found")
        if wants_association(payload.actor_ids):
            actors = resolve_ids(self.session, Actor, payload.actor_ids)
            if actors is None:
                return None, None, not_found("Actor not found")
        return genres, actors, None

    def create_movie(self, data: Mapping[str, Any]) -> ServiceResult:
        """
        Create a movie and its genre/actor associations in one transaction.

        The director is resolved before anything is written.
        """
        if not isinstance(data, Mapping):
            return invalid("Invalid request body")

        try:
            payload = MovieCreate.model_validate(data)
        except ValidationError as e:
            return invalid(first_error_message(e))

        try:
            director = self.session.get(Director, payload.director_id)
            if director is None:
                return not_found("Director not found")

            genres, actors, failure = self._resolve_associations(payload)
            if failure is not None:
                return failure

            movie = Movie(**payload.column_values())
            if genres is not None:
                movie.genres = genres
            if actors is not None:
                movie.actors = actors

            self.session.add(movie)
            self.session.commit()
            movie_id = movie.id
        except SQLAlchemyError:
            return self._internal("movie_create_failed", "Failed to create movie")

        log_entity_change("movie", "create", movie_id, director_id=payload.director_id)
        return self.get_movie(movie_id)

    def update_movie(self, movie_id: Any, data: Mapping[str, Any]) -> ServiceResult:
        """
        Apply a partial update.

        Only allow-listed columns present in the payload are written. Genre
        and actor sets are replaced only for a non-empty, non-sentinel list.
        """
        movie_id = coerce_id(movie_id)
        if movie_id is None:
            return invalid("Invalid movie ID")
        if not isinstance(data, Mapping):
            return invalid("Invalid request body")

        try:
            movie = self.session.get(Movie, movie_id)
            if movie is None:
                return not_found("Movie not found")

            try:
                patch = MoviePatch.model_validate(data)
            except ValidationError as e:
                return invalid(first_error_message(e))

            values = patch.column_values()
            if "director_id" in values:
                if self.session.get(Director, values["director_id"]) is None:
                    return not_found("Director not found")

            genres, actors, failure = self._resolve_associations(patch)
            if failure is not None:
                return failure

            for name, value in values.items():
                setattr(movie, name, value)
            if genres is not None:
                movie.genres = genres
            if actors is not None:
                movie.actors = actors

            self.session.commit()
        except SQLAlchemyError:
            return self._internal("movie_update_failed", "Failed to update movie", movie_id=movie_id)

        log_entity_change("movie", "update", movie_id, fields=sorted(values))
        return self.get_movie(movie_id)

    def delete_movie(self, movie_id: Any) -> ServiceResult:
        movie_id = coerce_id(movie_id)
        if movie_id is None:
            return invalid("Invalid movie ID")

        try:
            movie = self.session.get(Movie, movie_id)
            if movie is None:
                return not_found("Movie not found")
            self.session.delete(movie)
            self.session.commit()
        except SQLAlchemyError:
            return self._internal("movie_delete_failed", "Failed to delete movie", movie_id=movie_id)

        log_entity_change("movie", "delete", movie_id)
        return ok()
