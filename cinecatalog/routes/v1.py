"""
/api/v1 routes: movies and genres only.

v1 services raise; every handler catches CatalogError and maps its kind onto
a status. Anything else is left to the application's 500 handler.
"""

from flask import Blueprint, jsonify, request

from cinecatalog.errors import CatalogError
from cinecatalog.routes.responses import json_body, raise_response
from cinecatalog.services import LegacyGenreService, LegacyMovieService
from cinecatalog.storage import get_storage

bp = Blueprint("api_v1", __name__)


def _movies():
    return LegacyMovieService(get_storage().session)


def _genres():
    return LegacyGenreService(get_storage().session)


@bp.route("/movies", methods=["POST"])
def create_movie():
    try:
        movie = _movies().create_movie(json_body())
    except CatalogError as e:
        return raise_response(e)
    return jsonify(movie), 201


@bp.route("/movies", methods=["GET"])
def list_movies():
    """
    GET /api/v1/movies?title&genre&page&limit&sort&order
    Returns {count, data}.
    """
    try:
        count, movies = _movies().list_movies(request.args)
    except CatalogError as e:
        return raise_response(e)
    return jsonify({"count": count, "data": movies})


@bp.route("/movies/<movie_id>", methods=["GET"])
def get_movie(movie_id):
    try:
        return jsonify(_movies().get_movie(movie_id))
    except CatalogError as e:
        return raise_response(e)


@bp.route("/movies/<movie_id>", methods=["PUT"])
def update_movie(movie_id):
    try:
        return jsonify(_movies().update_movie(movie_id, json_body()))
    except CatalogError as e:
        return raise_response(e)


@bp.route("/movies/<movie_id>", methods=["DELETE"])
def delete_movie(movie_id):
    try:
        _movies().delete_movie(movie_id)
    except CatalogError as e:
        return raise_response(e)
    return "", 204


@bp.route("/genres", methods=["POST"])
def create_genre():
    try:
        genre = _genres().create_genre(json_body())
    except CatalogError as e:
        return raise_response(e)
    return jsonify(genre), 201


@bp.route("/genres", methods=["GET"])
def list_genres():
    try:
        return jsonify(_genres().get_genres())
    except CatalogError as e:
        return raise_response(e)


@bp.route("/genres/<genre_id>", methods=["GET"])
def get_genre(genre_id):
    try:
        return jsonify(_genres().get_genre(genre_id))
    except CatalogError as e:
        return raise_response(e)


@bp.route("/genres/<genre_id>", methods=["PUT"])
def update_genre(genre_id):
    try:
        return jsonify(_genres().update_genre(genre_id, json_body()))
    except CatalogError as e:
        return raise_response(e)


@bp.route("/genres/<genre_id>", methods=["DELETE"])
def delete_genre(genre_id):
    try:
        _genres().delete_genre(genre_id)
    except CatalogError as e:
        return raise_response(e)
    return "", 204
