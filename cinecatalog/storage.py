"""
Storage client for the catalog database.

Wraps the Flask-SQLAlchemy extension with an explicit lifecycle: open() at
startup binds the engine and synchronises the schema, close() at shutdown
releases sessions and pooled connections. Services never reach for a global
handle; they are built with the session this client exposes.
"""

from typing import Optional

from flask import Flask, current_app
from flask_sqlalchemy import SQLAlchemy

from cinecatalog.logging_config import get_logger
from cinecatalog.models import db as default_db

logger = get_logger(__name__)

EXTENSION_KEY = "cinecatalog.storage"


class Storage:
    """Owns the database binding for one Flask application."""

    def __init__(self, database: Optional[SQLAlchemy] = None):
        self.db = database or default_db
        self.app: Optional[Flask] = None
        self._closed = False

    def open(self, app: Flask) -> "Storage":
        """
        Bind the extension to app and create any missing tables.

        Existing tables and rows are never dropped.
        """
        self.db.init_app(app)
        self.app = app
        app.extensions[EXTENSION_KEY] = self
        with app.app_context():
            self.db.create_all()
        logger.info(
            "storage_opened",
            dialect=self._dialect(),
            tables=sorted(self.db.metadata.tables),
        )
        return self

    @property
    def session(self):
        """The request-scoped session; requires an application context."""
        return self.db.session

    def close(self):
        """Remove the scoped session and dispose of the connection pool."""
        if self._closed or self.app is None:
            return
        with self.app.app_context():
            self.db.session.remove()
            self.db.engine.dispose()
        self._closed = True
        logger.info("storage_closed")

    def _dialect(self) -> Optional[str]:
        if self.app is None:
            return None
        with self.app.app_context():
            return self.db.engine.dialect.name


def get_storage(app: Optional[Flask] = None) -> Storage:
    """Return the Storage bound to app (defaults to the current app)."""
    app = app or current_app
    return app.extensions[EXTENSION_KEY]
