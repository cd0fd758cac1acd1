"""
Tests for the /api/v1 routes.
"""

import json


def body(response):
    return json.loads(response.data)


class TestLegacyMovieRoutes:
    """Test /api/v1/movies."""

    def test_list(self, client, catalog):
        response = client.get("/api/v1/movies?limit=2")

        assert response.status_code == 200
        data = body(response)
        assert data["count"] == 4
        assert len(data["data"]) == 2

    def test_list_by_title_and_genre(self, client, catalog):
        data = body(client.get(f"/api/v1/movies?title=a&genre={catalog['drama'].id}"))
        assert {m["title"] for m in data["data"]} == {"Interstellar", "Arrival"}

    def test_list_bad_genre(self, client):
        response = client.get("/api/v1/movies?genre=abc")
        assert response.status_code == 400
        assert body(response) == {"error": "Invalid genre parameter"}

    def test_list_malformed_numbers(self, client):
        assert body(client.get("/api/v1/movies?genre=%C2%B2")) == {"error": "Invalid genre parameter"}
        assert client.get("/api/v1/movies?genre=1,99999999999999999999").status_code == 400
        assert client.get("/api/v1/movies?page=99999999999999999999").status_code == 400

    def test_malformed_id(self, client):
        response = client.get("/api/v1/movies/99999999999999999999")
        assert response.status_code == 400
        assert body(response) == {"error": "Invalid id parameter"}

    def test_create(self, client, catalog):
        response = client.post("/api/v1/movies", json={"title": "Memento", "year": 2000})
        assert response.status_code == 201
        assert body(response)["title"] == "Memento"

    def test_create_invalid_year(self, client):
        response = client.post("/api/v1/movies", json={"title": "Old", "year": 1500})
        assert response.status_code == 400
        assert body(response) == {"error": "Invalid year"}

    def test_get_update_delete(self, client, catalog):
        movie_id = catalog["arrival"].id

        assert body(client.get(f"/api/v1/movies/{movie_id}"))["title"] == "Arrival"

        updated = client.put(f"/api/v1/movies/{movie_id}", json={"title": "Story of Your Life"})
        assert updated.status_code == 200
        assert body(updated)["title"] == "Story of Your Life"

        deleted = client.delete(f"/api/v1/movies/{movie_id}")
        assert deleted.status_code == 204
        assert client.get(f"/api/v1/movies/{movie_id}").status_code == 404


class TestLegacyGenreRoutes:
    """Test /api/v1/genres."""

    def test_list(self, client, catalog):
        data = body(client.get("/api/v1/genres"))
        assert isinstance(data, list)
        assert len(data) == 3

    def test_create_get_update_delete(self, client):
        created = client.post("/api/v1/genres", json={"name": "Comedy"})
        assert created.status_code == 201
        genre_id = body(created)["id"]

        assert body(client.get(f"/api/v1/genres/{genre_id}"))["name"] == "Comedy"
        renamed = client.put(f"/api/v1/genres/{genre_id}", json={"name": "Dark Comedy"})
        assert body(renamed)["name"] == "Dark Comedy"

        assert client.delete(f"/api/v1/genres/{genre_id}").status_code == 204
        assert client.get(f"/api/v1/genres/{genre_id}").status_code == 404

    def test_create_without_name(self, client):
        response = client.post("/api/v1/genres", json={"name": "  "})
        assert response.status_code == 400

    def test_invalid_id(self, client):
        assert client.get("/api/v1/genres/abc").status_code == 400
