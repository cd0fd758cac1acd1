# Initialize structured logging early
from cinecatalog.logging_config import get_logger, configure_structlog

import atexit
from typing import Any, Mapping, Optional

from flask import Flask, Response, jsonify
from werkzeug.exceptions import HTTPException

from cinecatalog.config import Config
from cinecatalog.logging_middleware import init_logging_middleware
from cinecatalog.metrics import get_metrics
from cinecatalog.models import db
from cinecatalog.routes import api_v1, api_v2
from cinecatalog.storage import Storage

logger = get_logger(__name__)


def _register_error_handlers(app: Flask):
    """JSON bodies for framework errors; unexpected exceptions never leak detail."""

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        return jsonify({"error": error.description or error.name}), error.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(error):
        logger.error("unhandled_exception", error=str(error), exc_info=True)
        return jsonify({"error": "Internal server error"}), 500


def create_app(config_overrides: Optional[Mapping[str, Any]] = None) -> Flask:
    """
    Build the CineCatalog application.

    Args:
        config_overrides: Values applied on top of the environment config
            (tests use this to point at an in-memory database)

    Returns:
        Configured Flask app with storage opened and blueprints registered
    """
    app = Flask(__name__)
    app.config.from_mapping(Config.from_env().as_dict())
    if config_overrides:
        app.config.update(config_overrides)

    configure_structlog(app.config.get("LOG_LEVEL"))

    # Initialize logging middleware
    init_logging_middleware(app)
    _register_error_handlers(app)

    storage = Storage(db).open(app)
    atexit.register(storage.close)

    app.register_blueprint(api_v1, url_prefix="/api/v1")
    app.register_blueprint(api_v2, url_prefix="/api/v2")

    @app.route('/health')
    def health():
        """Health check endpoint for deployment monitoring."""
        return jsonify({"status": "healthy", "service": "cinecatalog"}), 200

    @app.route('/metrics')
    def metrics():
        """Expose Prometheus metrics."""
        metrics_text, content_type = get_metrics()
        return Response(metrics_text, content_type=content_type)

    logger.info("app_created", blueprints=sorted(app.blueprints))
    return app
