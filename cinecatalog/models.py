"""
Database models for the CineCatalog movie catalog.

This module defines SQLAlchemy models for the catalog entities:
- Movie: A film, owned by at most one Director
- Director: Has many movies
- Actor: Linked to movies through movie_actors
- Genre: Linked to movies through movie_genres
"""

from datetime import datetime, timezone

from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()

MOVIE_RELATIONS = ("director", "genres", "actors")

# Largest value an Integer column holds on every supported backend
MAX_INTEGER = 2**31 - 1


def _utcnow():
    return datetime.now(timezone.utc)


def _isoformat(value):
    return value.isoformat() if value else None


movie_actors = db.Table(
    'movie_actors',
    db.Column('movie_id', db.Integer, db.ForeignKey('movies.id', ondelete='CASCADE'), primary_key=True),
    db.Column('actor_id', db.Integer, db.ForeignKey('actors.id', ondelete='CASCADE'), primary_key=True),
)

movie_genres = db.Table(
    'movie_genres',
    db.Column('movie_id', db.Integer, db.ForeignKey('movies.id', ondelete='CASCADE'), primary_key=True),
    db.Column('genre_id', db.Integer, db.ForeignKey('genres.id', ondelete='CASCADE'), primary_key=True),
)


class TimestampMixin:
    created_at = db.Column(db.DateTime, default=_utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=_utcnow, onupdate=_utcnow, nullable=False)


class Director(TimestampMixin, db.Model):
    """A film director. Names are unique across the catalog."""
    __tablename__ = 'directors'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False, unique=True)

    movies = db.relationship('Movie', back_populates='director', order_by='Movie.id')

    def to_summary(self):
        return {'id': self.id, 'name': self.name}

    def to_dict(self):
        """Convert the director to a dictionary for JSON serialization."""
        return {
            'id': self.id,
            'name': self.name,
            'createdAt': _isoformat(self.created_at),
            'updatedAt': _isoformat(self.updated_at),
        }

    def __repr__(self):
        return f'<Director {self.name}>'


class Actor(TimestampMixin, db.Model):
    __tablename__ = 'actors'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)

    movies = db.relationship(
        'Movie', secondary=movie_actors, back_populates='actors', order_by='Movie.id'
    )

    def to_summary(self):
        return {'id': self.id, 'name': self.name}

    def to_dict(self, include_movies=False):
        data = {
            'id': self.id,
            'name': self.name,
            'createdAt': _isoformat(self.created_at),
            'updatedAt': _isoformat(self.updated_at),
        }
        if include_movies:
            data['movies'] = [movie.to_brief() for movie in self.movies]
        return data

    def __repr__(self):
        return f'<Actor {self.name}>'


class Genre(TimestampMixin, db.Model):
    __tablename__ = 'genres'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)

    movies = db.relationship(
        'Movie', secondary=movie_genres, back_populates='genres', order_by='Movie.id'
    )

    def to_summary(self):
        return {'id': self.id, 'name': self.name}

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'createdAt': _isoformat(self.created_at),
            'updatedAt': _isoformat(self.updated_at),
        }

    def __repr__(self):
        return f'<Genre {self.name}>'


class Movie(TimestampMixin, db.Model):
    """
    A catalog movie.

    The director foreign key is owned by the movie. Actor and genre links live
    in join tables and are replaced as whole sets.
    """
    __tablename__ = 'movies'

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(255), nullable=True)
    overview = db.Column(db.Text, nullable=True)
    year = db.Column(db.Integer, nullable=True, index=True)
    votes = db.Column(db.Integer, nullable=True)
    rating = db.Column(db.Float, nullable=True)
    popularity = db.Column(db.Float, nullable=True)
    budget = db.Column(db.Integer, nullable=True)
    poster_url = db.Column(db.String(512), nullable=True)

    director_id = db.Column(
        db.Integer, db.ForeignKey('directors.id', ondelete='SET NULL'), nullable=True, index=True
    )

    director = db.relationship('Director', back_populates='movies')
    actors = db.relationship(
        'Actor', secondary=movie_actors, back_populates='movies', order_by='Actor.id'
    )
    genres = db.relationship(
        'Genre', secondary=movie_genres, back_populates='movies', order_by='Genre.id'
    )

    def to_brief(self):
        """Shape used when a movie is nested under a director, actor or genre."""
        return {
            'id': self.id,
            'title': self.title,
            'overview': self.overview,
            'year': self.year,
        }

    def to_dict(self, include=MOVIE_RELATIONS):
        """
        Convert the movie to a dictionary for JSON serialization.

        Args:
            include: Names of the relations to attach ("director", "genres",
                "actors"). Relations not named are never loaded.
        """
        data = {
            'id': self.id,
            'title': self.title,
            'overview': self.overview,
            'year': self.year,
            'votes': self.votes,
            'rating': self.rating,
            'popularity': self.popularity,
            'budget': self.budget,
            'poster_url': self.poster_url,
            'directorId': self.director_id,
            'createdAt': _isoformat(self.created_at),
            'updatedAt': _isoformat(self.updated_at),
        }
        if 'director' in include:
            data['director'] = self.director.to_summary() if self.director else None
        if 'genres' in include:
            data['genres'] = [genre.to_summary() for genre in self.genres]
        if 'actors' in include:
            data['actors'] = [actor.to_summary() for actor in self.actors]
        return data

    def __repr__(self):
        return f'<Movie {self.title} ({self.year})>'
