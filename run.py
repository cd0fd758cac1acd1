#!/usr/bin/env python3
"""
Main entry point for running the CineCatalog Flask application.
"""

from cinecatalog.app import create_app

if __name__ == "__main__":
    # Database tables are synchronised inside create_app()
    app = create_app()
    app.run(port=app.config["PORT"], debug=app.config.get("DEBUG", False))
