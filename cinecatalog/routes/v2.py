"""
/api/v2 routes.

Controllers only fill defaults, call a service and map its result onto a
status code.
"""

from flask import Blueprint, request

from cinecatalog.routes.responses import json_body, respond
from cinecatalog.services import ActorService, DirectorService, GenreService, MovieService
from cinecatalog.storage import get_storage

bp = Blueprint("api_v2", __name__)

# Listing defaults applied when the query string omits a parameter
MOVIE_LIST_DEFAULTS = {
    "page": "1",
    "limit": "10",
    "sort": "createdAt",
    "order": "DESC",
    "actorsInclude": "0",
    "genresInclude": "0",
}

MOVIE_LIST_PARAMS = (
    "page", "limit", "genreId", "directorId", "sort", "order",
    "search", "actorsInclude", "genresInclude",
)


def _service(service_cls):
    return service_cls(get_storage().session)


# --- Movies ---

@bp.route("/movies", methods=["GET"])
def list_movies():
    """
    GET /api/v2/movies?page&limit&genreId&directorId&sort&order&search&actorsInclude&genresInclude
    Returns {total, page, totalPages, movies}.
    """
    params = dict(MOVIE_LIST_DEFAULTS)
    for name in MOVIE_LIST_PARAMS:
        if name in request.args:
            params[name] = request.args.get(name)
    return respond(_service(MovieService).list_movies(params))


@bp.route("/movies/<movie_id>", methods=["GET"])
def get_movie(movie_id):
    return respond(_service(MovieService).get_movie(movie_id))


@bp.route("/movies", methods=["POST"])
def create_movie():
    """
    POST /api/v2/movies

    Expected JSON body:
    {
        "title": "Inception",
        "overview": "...",
        "year": 2010,
        "votes": 35000,
        "rating": 8.8,
        "popularity": 83.9,
        "budget": 160000000,
        "poster_url": "https://...",
        "directorId": 1,
        "genreIds": [1, 2],
        "actorIds": []
    }
    """
    return respond(_service(MovieService).create_movie(json_body()), status=201)


@bp.route("/movies/<movie_id>", methods=["PUT"])
def update_movie(movie_id):
    return respond(_service(MovieService).update_movie(movie_id, json_body()))


@bp.route("/movies/<movie_id>", methods=["DELETE"])
def delete_movie(movie_id):
    return respond(_service(MovieService).delete_movie(movie_id), status=204)


# --- Directors, actors, genres ---

def _list_named(service_cls):
    def view():
        return respond(_service(service_cls).list_page(
            page=request.args.get("page", "1"),
            limit=request.args.get("limit", "20"),
            sort_by=request.args.get("sortBy", "id"),
            sort=request.args.get("sort", "asc"),
        ))
    return view


def _list_genres():
    return respond(_service(GenreService).list_genres())


def _get_named(service_cls):
    def view(entity_id):
        return respond(_service(service_cls).get(entity_id))
    return view


def _create_named(service_cls):
    def view():
        return respond(_service(service_cls).create(json_body()), status=201)
    return view


def _update_named(service_cls):
    def view(entity_id):
        return respond(_service(service_cls).update(entity_id, json_body()))
    return view


def _delete_named(service_cls):
    def view(entity_id):
        return respond(_service(service_cls).delete(entity_id), status=204)
    return view


def _movies_of_named(service_cls):
    def view(entity_id):
        return respond(_service(service_cls).movies_of(entity_id))
    return view


def register_named_entity(prefix, service_cls, list_view=None):
    """
    Register GET/POST /<prefix>, GET/PUT/DELETE /<prefix>/<id> and
    GET /<prefix>/<id>/movies for one named entity.
    """
    name = service_cls.entity
    bp.add_url_rule(
        f"/{prefix}", f"list_{prefix}", list_view or _list_named(service_cls), methods=["GET"]
    )
    bp.add_url_rule(f"/{prefix}", f"create_{name}", _create_named(service_cls), methods=["POST"])
    bp.add_url_rule(
        f"/{prefix}/<entity_id>", f"get_{name}", _get_named(service_cls), methods=["GET"]
    )
    bp.add_url_rule(
        f"/{prefix}/<entity_id>", f"update_{name}", _update_named(service_cls), methods=["PUT"]
    )
    bp.add_url_rule(
        f"/{prefix}/<entity_id>", f"delete_{name}", _delete_named(service_cls), methods=["DELETE"]
    )
    bp.add_url_rule(
        f"/{prefix}/<entity_id>/movies", f"movies_by_{name}",
        _movies_of_named(service_cls), methods=["GET"],
    )


register_named_entity("directors", DirectorService)
register_named_entity("actors", ActorService)
register_named_entity("genres", GenreService, list_view=_list_genres)
