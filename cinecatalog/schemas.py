"""
Request payload schemas for CineCatalog.

This module defines Pydantic models for the create and update payloads the
API accepts. Unknown keys are ignored, so only the fields declared here can
ever reach a database row.
"""

from datetime import datetime
from typing import Any, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator

from cinecatalog.models import MAX_INTEGER

MIN_MOVIE_YEAR = 1800
MAX_RATING = 10

# Message reported when a field fails its type check before any validator runs
FIELD_MESSAGES = {
    "title": "Invalid title",
    "overview": "Invalid overview",
    "year": "Invalid year",
    "votes": "Invalid votes",
    "rating": "Invalid rating",
    "popularity": "Invalid popularity",
    "budget": "Invalid budget",
    "poster_url": "Invalid poster_url",
    "director_id": "Invalid directorId",
    "genre_ids": "Invalid genreIds",
    "actor_ids": "Invalid actorIds",
    "name": "Invalid name",
}

# Columns a movie payload may write, in the order they are applied
MOVIE_FIELDS = (
    "title", "overview", "year", "votes", "rating",
    "popularity", "budget", "poster_url", "director_id",
)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _check_rating(value: Any) -> Any:
    if not _is_number(value) or value < 0 or value > MAX_RATING:
        raise ValueError("Invalid rating")
    return value


def _check_year(value: Any) -> Any:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError("Invalid year")
    if value < MIN_MOVIE_YEAR or value > datetime.now().year:
        raise ValueError("Invalid year")
    return value


def _check_id_list(value: Any, message: str) -> Any:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError(message)
    for item in value:
        if isinstance(item, bool) or not isinstance(item, int) or abs(item) > MAX_INTEGER:
            raise ValueError(message)
    return value


class MoviePatch(BaseModel):
    """
    Partial movie payload. Every field is optional; only fields present in
    the request are applied.
    """
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    title: Optional[str] = Field(None, description="Movie title")
    overview: Optional[str] = Field(None, description="Plot overview")
    year: Optional[int] = Field(None, description="Release year")
    votes: Optional[int] = Field(None, description="Vote count", ge=0, le=MAX_INTEGER)
    rating: Optional[float] = Field(None, description="Average rating (0-10)")
    popularity: Optional[float] = Field(None, description="Popularity score")
    budget: Optional[int] = Field(None, description="Production budget", ge=0, le=MAX_INTEGER)
    poster_url: Optional[str] = Field(None, description="Poster image URL")
    director_id: Optional[int] = Field(
        None,
        validation_alias=AliasChoices("directorId", "DirectorId", "director_id"),
        description="Director ID",
    )
    genre_ids: Optional[List[int]] = Field(
        None, validation_alias=AliasChoices("genreIds", "genre_ids"), description="Genre IDs"
    )
    actor_ids: Optional[List[int]] = Field(
        None, validation_alias=AliasChoices("actorIds", "actor_ids"), description="Actor IDs"
    )

    @field_validator("rating", mode="before")
    @classmethod
    def validate_rating(cls, v):
        # Defaults are not validated, so None here was sent explicitly
        return _check_rating(v)

    @field_validator("year", mode="before")
    @classmethod
    def validate_year(cls, v):
        return _check_year(v)

    @field_validator("director_id", mode="before")
    @classmethod
    def validate_director_id(cls, v):
        if isinstance(v, bool) or not isinstance(v, int) or not 0 < v <= MAX_INTEGER:
            raise ValueError("Invalid directorId")
        return v

    @field_validator("genre_ids", mode="before")
    @classmethod
    def validate_genre_ids(cls, v):
        if v is None:
            return v
        return _check_id_list(v, "Invalid genreIds")

    @field_validator("actor_ids", mode="before")
    @classmethod
    def validate_actor_ids(cls, v):
        if v is None:
            return v
        return _check_id_list(v, "Invalid actorIds")

    def column_values(self) -> dict:
        """Allow-listed column values that were present in the payload."""
        present = self.model_fields_set
        return {name: getattr(self, name) for name in MOVIE_FIELDS if name in present}


class MovieCreate(MoviePatch):
    """
    Full movie payload for creation. Year, rating and director are required.
    """
    year: int = Field(..., description="Release year")
    rating: float = Field(..., description="Average rating (0-10)")
    director_id: int = Field(
        ...,
        validation_alias=AliasChoices("directorId", "DirectorId", "director_id"),
        description="Director ID",
    )
    genre_ids: Optional[List[int]] = Field(
        default_factory=list, validation_alias=AliasChoices("genreIds", "genre_ids")
    )
    actor_ids: Optional[List[int]] = Field(
        default_factory=list, validation_alias=AliasChoices("actorIds", "actor_ids")
    )


class NamedEntityPatch(BaseModel):
    """Update payload for directors, actors and genres."""
    model_config = ConfigDict(extra="ignore")

    name: Optional[str] = Field(None, description="Display name", max_length=255)

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v):
        if v is None:
            return v
        if not isinstance(v, str):
            raise ValueError("Invalid name")
        return v.strip() or None


class NamedEntityCreate(NamedEntityPatch):
    """Create payload for directors, actors and genres."""
    # A missing name runs through strip_name too so it reports "Name is required"
    name: str = Field(None, validate_default=True, description="Display name", max_length=255)

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v):
        if not isinstance(v, str) or not v.strip():
            raise ValueError("Name is required")
        return v.strip()


def first_error_message(exc: ValidationError) -> str:
    """
    Reduce a pydantic ValidationError to the message for its first field.

    Messages raised by our own validators are reported verbatim; type and
    constraint failures fall back to the per-field message.
    """
    errors = exc.errors()
    if not errors:
        return "Invalid request body"
    first = errors[0]
    loc = first.get("loc") or ()
    ctx_error = (first.get("ctx") or {}).get("error")
    if isinstance(ctx_error, ValueError) and str(ctx_error):
        return str(ctx_error)
    field = loc[0] if loc else None
    if first.get("type") == "missing" and field:
        return FIELD_MESSAGES.get(_canonical_field(field), f"Invalid {field}")
    return FIELD_MESSAGES.get(_canonical_field(field), "Invalid request body")


def _canonical_field(field: Any) -> Any:
    aliases = {
        "directorId": "director_id",
        "DirectorId": "director_id",
        "genreIds": "genre_ids",
        "actorIds": "actor_ids",
    }
    return aliases.get(field, field)


def wants_association(ids: Optional[List[int]]) -> bool:
    """
    True when an id list should replace an association set.

    An empty list, or one whose first element is the sentinel 0, leaves the
    existing set untouched.
    """
    return bool(ids) and ids[0] != 0
