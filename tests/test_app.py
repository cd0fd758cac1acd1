"""
Tests for the Flask application core functionality.
Tests app construction, health/metrics routes, error handling and request IDs.
"""

import json

from flask import Flask

from cinecatalog.app import create_app
from cinecatalog.storage import EXTENSION_KEY, Storage


class TestFlaskAppStartup:
    """Test Flask application startup and configuration."""

    def test_app_is_flask_instance(self, app):
        assert isinstance(app, Flask)

    def test_test_config_applied(self, app):
        assert app.config["TESTING"] is True
        assert app.config["SQLALCHEMY_DATABASE_URI"] == "sqlite:///:memory:"

    def test_blueprints_registered(self, app):
        assert {"api_v1", "api_v2"} <= set(app.blueprints)

    def test_storage_registered(self, app):
        assert isinstance(app.extensions[EXTENSION_KEY], Storage)

    def test_each_call_builds_a_new_app(self, app):
        other = create_app({"TESTING": True, "SQLALCHEMY_DATABASE_URI": "sqlite:///:memory:"})
        assert other is not app


class TestHealthEndpoint:
    """Test the health check endpoint."""

    def test_health(self, client):
        response = client.get('/health')

        assert response.status_code == 200
        assert response.content_type == 'application/json'
        data = json.loads(response.data)
        assert data == {"status": "healthy", "service": "cinecatalog"}


class TestErrorHandling:
    """Test JSON error responses."""

    def test_unknown_route_is_json_404(self, client):
        response = client.get('/api/v2/nothing-here')

        assert response.status_code == 404
        assert "error" in json.loads(response.data)

    def test_method_not_allowed_is_json(self, client):
        response = client.patch('/api/v2/movies')

        assert response.status_code == 405
        assert "error" in json.loads(response.data)

    def test_unexpected_exception_hides_detail(self, app, client):
        @app.route('/boom')
        def boom():
            raise RuntimeError("secret internals")

        response = client.get('/boom')

        assert response.status_code == 500
        assert json.loads(response.data) == {"error": "Internal server error"}


class TestRequestId:
    """Test X-Request-ID propagation."""

    def test_generated_when_missing(self, client):
        response = client.get('/health')
        assert response.headers.get('X-Request-ID')

    def test_incoming_id_echoed(self, client):
        response = client.get('/health', headers={'X-Request-ID': 'abc-123'})
        assert response.headers['X-Request-ID'] == 'abc-123'

    def test_unsafe_incoming_id_replaced(self, client):
        response = client.get('/health', headers={'X-Request-ID': 'not a safe id'})
        request_id = response.headers['X-Request-ID']
        assert request_id and request_id != 'not a safe id'

    def test_ids_differ_between_requests(self, client):
        first = client.get('/health').headers['X-Request-ID']
        second = client.get('/health').headers['X-Request-ID']
        assert first != second
