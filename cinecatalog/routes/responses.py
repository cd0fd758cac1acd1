"""
Helpers that turn service outcomes into Flask responses.
"""

from flask import jsonify, request

from cinecatalog.errors import CatalogError, ErrorKind, status_for
from cinecatalog.results import Failure


def error_response(kind: ErrorKind, message: str):
    return jsonify({"error": message}), status_for(kind)


def respond(result, status: int = 200):
    """
    Map a service result onto (body, status).

    A Success becomes its value with `status` (204 gives an empty body); a
    Failure becomes {"error": message} with the status its kind maps to.
    """
    if isinstance(result, Failure):
        return error_response(result.kind, result.message)
    if status == 204:
        return "", 204
    return jsonify(result.value), status


def raise_response(error: CatalogError):
    """Response for an exception raised by a v1 service."""
    return error_response(error.kind, error.message)


def json_body():
    """
    The request body parsed as JSON, or None when it is missing or malformed.

    Services reject anything that is not an object.
    """
    return request.get_json(silent=True)
