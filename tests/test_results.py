"""
Tests for the error taxonomy, service results and response mapping.
"""

import json

import pytest

from cinecatalog.errors import (
    CatalogError,
    EntityNotFoundError,
    ErrorKind,
    InvalidInputError,
    PersistenceError,
    status_for,
)
from cinecatalog.results import Failure, Success, internal, invalid, not_found, ok
from cinecatalog.routes.responses import raise_response, respond


class TestErrorTaxonomy:
    """Test ErrorKind to status mapping and the exception hierarchy."""

    @pytest.mark.parametrize("kind,status", [
        (ErrorKind.VALIDATION, 400),
        (ErrorKind.NOT_FOUND, 404),
        (ErrorKind.INTERNAL, 500),
    ])
    def test_status_for(self, kind, status):
        assert status_for(kind) == status

    def test_exception_kinds(self):
        assert InvalidInputError("bad").status_code == 400
        assert EntityNotFoundError("gone").status_code == 404
        assert PersistenceError("db").status_code == 500

    def test_all_are_catalog_errors(self):
        for error in (InvalidInputError("a"), EntityNotFoundError("b"), PersistenceError("c")):
            assert isinstance(error, CatalogError)
            assert str(error) == error.message

    def test_persistence_error_keeps_cause(self):
        cause = RuntimeError("connection reset")
        assert PersistenceError("Failed", original_error=cause).original_error is cause


class TestResults:
    """Test Success and Failure."""

    def test_success(self):
        result = ok({"id": 1})
        assert isinstance(result, Success)
        assert result.ok
        assert result.value == {"id": 1}

    def test_success_without_value(self):
        assert ok().value is None

    @pytest.mark.parametrize("factory,kind,status", [
        (invalid, ErrorKind.VALIDATION, 400),
        (not_found, ErrorKind.NOT_FOUND, 404),
        (internal, ErrorKind.INTERNAL, 500),
    ])
    def test_failures(self, factory, kind, status):
        result = factory("message")
        assert isinstance(result, Failure)
        assert not result.ok
        assert result.kind == kind
        assert result.status_code == status
        assert result.message == "message"


class TestRespond:
    """Test respond() and raise_response()."""

    def test_success_body(self, app):
        with app.test_request_context():
            body, status = respond(ok({"id": 3}), status=201)
        assert status == 201
        assert json.loads(body.data) == {"id": 3}

    def test_no_content(self, app):
        with app.test_request_context():
            assert respond(ok(), status=204) == ("", 204)

    def test_failure_body(self, app):
        with app.test_request_context():
            body, status = respond(not_found("Movie not found"))
        assert status == 404
        assert json.loads(body.data) == {"error": "Movie not found"}

    def test_failure_ignores_success_status(self, app):
        with app.test_request_context():
            _, status = respond(invalid("Invalid rating"), status=201)
        assert status == 400

    def test_raise_response(self, app):
        with app.test_request_context():
            body, status = raise_response(EntityNotFoundError("Genre not found"))
        assert status == 404
        assert json.loads(body.data) == {"error": "Genre not found"}
