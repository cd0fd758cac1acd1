"""
Tests for the director, actor and genre services.
"""

from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from cinecatalog.errors import ErrorKind
from cinecatalog.models import Director, Movie
from cinecatalog.services import ActorService, DirectorService, GenreService


class TestListPage:
    """Test the shared paginated listing."""

    def test_directors_page(self, session, catalog):
        result = DirectorService(session).list_page(page=1, limit=1)

        assert result.ok
        assert result.value["total"] == 2
        assert result.value["page"] == 1
        assert result.value["totalPages"] == 2
        assert len(result.value["directors"]) == 1

    def test_sort_by_name_desc(self, session, catalog):
        result = ActorService(session).list_page(sort_by="name", sort="DESC")
        names = [a["name"] for a in result.value["actors"]]
        assert names == ["Tom Hardy", "Leonardo DiCaprio", "Amy Adams"]

    def test_unknown_direction_is_ascending(self, session, catalog):
        result = ActorService(session).list_page(sort_by="name", sort="sideways")
        names = [a["name"] for a in result.value["actors"]]
        assert names == sorted(names)

    def test_invalid_sort_by(self, session, catalog):
        result = DirectorService(session).list_page(sort_by="createdAt")
        assert result.kind == ErrorKind.VALIDATION
        assert result.message == "Invalid sortBy field"

    @pytest.mark.parametrize("page,limit", [("0", "20"), ("1", "abc"), (-1, 5)])
    def test_invalid_pagination(self, page, limit):
        session = MagicMock()
        result = DirectorService(session).list_page(page=page, limit=limit)
        assert result.message == "Invalid pagination parameters"
        session.scalar.assert_not_called()

    def test_listing_does_not_embed_movies(self, session, catalog):
        actors = ActorService(session).list_page().value["actors"]
        assert all("movies" not in actor for actor in actors)

    def test_empty(self, session):
        result = GenreService(session).list_page()
        assert result.value == {"total": 0, "page": 1, "totalPages": 0, "genres": []}

    def test_database_failure(self):
        session = MagicMock()
        session.scalar.side_effect = OperationalError("SELECT", {}, Exception("gone"))

        result = ActorService(session).list_page()

        assert result.kind == ErrorKind.INTERNAL
        assert result.message == "Failed to fetch actors"
        session.rollback.assert_called_once()


class TestGenres:
    """Test GenreService.list_genres."""

    def test_all_genres_by_name(self, session, catalog):
        result = GenreService(session).list_genres()
        assert [g["name"] for g in result.value["genres"]] == ["Action", "Drama", "Sci-Fi"]


class TestGetAndMovies:
    """Test get and movies_of."""

    def test_get_director(self, session, catalog):
        result = DirectorService(session).get(catalog["nolan"].id)
        assert result.value["name"] == "Christopher Nolan"
        assert "createdAt" in result.value

    def test_get_actor_includes_movies(self, session, catalog):
        result = ActorService(session).get(catalog["hardy"].id)
        assert [m["title"] for m in result.value["movies"]] == ["Inception"]

    def test_get_missing(self, session, catalog):
        result = GenreService(session).get(9999)
        assert result.kind == ErrorKind.NOT_FOUND
        assert result.message == "Genre not found"

    def test_get_invalid_id(self, session):
        assert DirectorService(session).get("x").kind == ErrorKind.VALIDATION

    def test_movies_by_director(self, session, catalog):
        result = DirectorService(session).movies_of(catalog["villeneuve"].id)

        assert result.value["director"]["name"] == "Denis Villeneuve"
        movies = result.value["movies"]
        assert {m["title"] for m in movies} == {"Dune", "Arrival"}
        assert set(movies[0]) == {"id", "title", "overview", "year"}

    def test_movies_by_genre(self, session, catalog):
        result = GenreService(session).movies_of(catalog["scifi"].id)
        assert len(result.value["movies"]) == 4

    def test_movies_by_actor_without_movies(self, session, catalog):
        actor = ActorService(session).create({"name": "Newcomer"}).value
        result = ActorService(session).movies_of(actor["id"])
        assert result.value["movies"] == []

    def test_movies_of_missing(self, session, catalog):
        result = ActorService(session).movies_of(9999)
        assert result.kind == ErrorKind.NOT_FOUND
        assert result.message == "Actor not found"


class TestCreateUpdateDelete:
    """Test writes."""

    def test_create(self, session):
        result = GenreService(session).create({"name": "  Horror  "})
        assert result.ok
        assert result.value["name"] == "Horror"
        assert result.value["id"] > 0

    @pytest.mark.parametrize("body", [{}, {"name": ""}, {"name": "   "}, {"name": 42}])
    def test_create_requires_name(self, session, body):
        result = ActorService(session).create(body)
        assert result.kind == ErrorKind.VALIDATION
        assert result.message == "Name is required"

    def test_create_non_mapping(self, session):
        assert ActorService(session).create("Bob").message == "Invalid request body"

    def test_duplicate_director_name(self, session, catalog):
        result = DirectorService(session).create({"name": "Christopher Nolan"})
        assert result.kind == ErrorKind.VALIDATION
        assert result.message == "Director name already exists"

    def test_duplicate_actor_names_allowed(self, session, catalog):
        assert ActorService(session).create({"name": "Tom Hardy"}).ok

    def test_rename_director_to_taken_name(self, session, catalog):
        result = DirectorService(session).update(catalog["villeneuve"].id, {"name": "Christopher Nolan"})
        assert result.message == "Director name already exists"
        assert session.get(Director, catalog["villeneuve"].id).name == "Denis Villeneuve"

    def test_rename_director_to_own_name(self, session, catalog):
        result = DirectorService(session).update(catalog["nolan"].id, {"name": "Christopher Nolan"})
        assert result.ok

    def test_update(self, session, catalog):
        result = GenreService(session).update(catalog["scifi"].id, {"name": "Science Fiction"})
        assert result.value["name"] == "Science Fiction"

    @pytest.mark.parametrize("body", [{}, {"name": ""}, {"name": None}])
    def test_update_blank_name_keeps_current(self, session, catalog, body):
        result = GenreService(session).update(catalog["drama"].id, body)
        assert result.value["name"] == "Drama"

    def test_update_missing(self, session, catalog):
        result = ActorService(session).update(9999, {"name": "x"})
        assert result.kind == ErrorKind.NOT_FOUND

    def test_delete_director_detaches_movies(self, session, catalog):
        director_id = catalog["villeneuve"].id
        dune_id = catalog["dune"].id

        result = DirectorService(session).delete(director_id)

        assert result.ok
        assert session.get(Director, director_id) is None
        assert session.get(Movie, dune_id).director_id is None

    def test_delete_genre_unlinks_movies(self, session, catalog):
        inception_id = catalog["inception"].id
        GenreService(session).delete(catalog["action"].id)
        assert [g.name for g in session.get(Movie, inception_id).genres] == ["Sci-Fi"]

    def test_delete_missing(self, session, catalog):
        result = DirectorService(session).delete(9999)
        assert result.kind == ErrorKind.NOT_FOUND
        assert result.message == "Director not found"
