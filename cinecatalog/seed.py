#!/usr/bin/env python3
"""
Populate the catalog with a small sample data set.

Usage:
    python -m cinecatalog.seed

Rows are looked up by name (movies by title and year) before being created,
so running the seed twice leaves a single copy of everything.
"""

from sqlalchemy import select

from cinecatalog.logging_config import get_logger
from cinecatalog.models import Actor, Director, Genre, Movie

logger = get_logger(__name__)

SAMPLE_MOVIES = [
    {
        "title": "Inception",
        "overview": "A thief who steals corporate secrets through dream-sharing technology.",
        "year": 2010, "votes": 35000, "rating": 8.8, "popularity": 83.9, "budget": 160000000,
        "director": "Christopher Nolan",
        "genres": ["Action", "Science Fiction"],
        "actors": ["Leonardo DiCaprio", "Tom Hardy", "Elliot Page"],
    },
    {
        "title": "Interstellar",
        "overview": "Explorers travel through a wormhole in search of a new home for humanity.",
        "year": 2014, "votes": 32000, "rating": 8.6, "popularity": 140.2, "budget": 165000000,
        "director": "Christopher Nolan",
        "genres": ["Science Fiction", "Drama"],
        "actors": ["Matthew McConaughey", "Anne Hathaway"],
    },
    {
        "title": "Arrival",
        "overview": "A linguist works with the military to communicate with alien lifeforms.",
        "year": 2016, "votes": 17000, "rating": 7.9, "popularity": 40.5, "budget": 47000000,
        "director": "Denis Villeneuve",
        "genres": ["Science Fiction", "Drama"],
        "actors": ["Amy Adams", "Jeremy Renner"],
    },
    {
        "title": "Lady Bird",
        "overview": "A high school senior navigates a turbulent relationship with her mother.",
        "year": 2017, "votes": 8000, "rating": 7.4, "popularity": 22.1, "budget": 10000000,
        "director": "Greta Gerwig",
        "genres": ["Comedy", "Drama"],
        "actors": ["Saoirse Ronan", "Laurie Metcalf"],
    },
]


def _get_or_create(session, model, name):
    row = session.scalar(select(model).where(model.name == name))
    if row is None:
        row = model(name=name)
        session.add(row)
    return row


def seed_catalog(session, movies=SAMPLE_MOVIES):
    """
    Insert the sample movies and everything they reference.

    Returns:
        Number of movies created (existing ones are skipped)
    """
    created = 0
    for entry in movies:
        existing = session.scalar(
            select(Movie).where(Movie.title == entry["title"], Movie.year == entry["year"])
        )
        if existing is not None:
            logger.info("seed_movie_skipped", title=entry["title"])
            continue

        columns = {k: v for k, v in entry.items() if k not in ("director", "genres", "actors")}
        movie = Movie(**columns)
        movie.director = _get_or_create(session, Director, entry["director"])
        movie.genres = [_get_or_create(session, Genre, name) for name in entry["genres"]]
        movie.actors = [_get_or_create(session, Actor, name) for name in entry["actors"]]
        session.add(movie)
        # Flush so the next lookup sees rows created for this movie
        session.flush()
        created += 1

    session.commit()
    logger.info("seed_completed", movies_created=created)
    return created


def main():
    from cinecatalog.app import create_app
    from cinecatalog.storage import get_storage

    app = create_app()
    with app.app_context():
        seed_catalog(get_storage().session)


if __name__ == "__main__":
    main()
