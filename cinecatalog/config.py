"""
Application configuration for CineCatalog.

Values are read from environment variables when the Config object is built,
so tests can patch the environment and call Config.from_env() again.
"""

import os
from typing import Optional

from sqlalchemy.engine import URL

from cinecatalog.secret_helper import load_database_password

# Get the project root directory (parent of cinecatalog package)
BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

DEFAULT_PORT = 3000
DEFAULT_DB_PORT = 5432


def resolve_database_url() -> str:
    """
    Work out the SQLAlchemy database URL.

    Priority:
      1) DATABASE_URL
      2) PostgreSQL built from DB_HOST, DB_PORT, DB_USER, DB_PASSWORD, DB_NAME
      3) Local SQLite file in the project root
    """
    database_url = os.getenv("DATABASE_URL")
    if database_url:
        # Heroku-style URLs use the scheme SQLAlchemy dropped in 1.4
        if database_url.startswith("postgres://"):
            database_url = "postgresql://" + database_url[len("postgres://"):]
        return database_url

    host = os.getenv("DB_HOST")
    if host:
        url = URL.create(
            "postgresql+psycopg2",
            username=os.getenv("DB_USER"),
            password=load_database_password(),
            host=host,
            port=int(os.getenv("DB_PORT", DEFAULT_DB_PORT)),
            database=os.getenv("DB_NAME"),
        )
        return url.render_as_string(hide_password=False)

    return 'sqlite:///' + os.path.join(BASE_DIR, 'cinecatalog.db')


class Config:
    """Flask configuration object."""

    SQLALCHEMY_TRACK_MODIFICATIONS = False

    def __init__(self, database_url: Optional[str] = None):
        self.SQLALCHEMY_DATABASE_URI = database_url or resolve_database_url()
        self.SQLALCHEMY_ECHO = os.getenv("DB_ECHO") == "1"
        self.SECRET_KEY = os.getenv('SECRET_KEY', 'dev-secret-key-change-in-production')
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
        self.PORT = int(os.getenv("PORT", DEFAULT_PORT))

    @classmethod
    def from_env(cls) -> "Config":
        return cls()

    def as_dict(self) -> dict:
        return {key: getattr(self, key) for key in dir(self) if key.isupper()}
