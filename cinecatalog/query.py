"""
Movie listing query builder.

Turns untrusted listing parameters (page, limit, sort, order, filters, search
term and include flags) into a validated MovieListParams, then into SQLAlchemy
statements, and runs them.

Validation is fail-fast: the first bad parameter raises QueryParameterError
and no statement is built or executed.
"""

import math
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Tuple

from sqlalchemy import func, or_, select
from sqlalchemy.orm import joinedload, selectinload

from cinecatalog.models import MAX_INTEGER, Genre, Movie

# Public sort names mapped to the column they order by
SORT_COLUMNS = {
    "title": Movie.title,
    "year": Movie.year,
    "votes": Movie.votes,
    "rating": Movie.rating,
    "popularity": Movie.popularity,
    "budget": Movie.budget,
    "createdAt": Movie.created_at,
}

VALID_ORDERS = ("ASC", "DESC")

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
DEFAULT_SORT = "createdAt"
DEFAULT_ORDER = "ASC"

_TRUE_FLAGS = {"1", "true", "yes", "on"}


class QueryParameterError(ValueError):
    """A listing parameter failed validation."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


def _is_ascii_digits(text: str) -> bool:
    return text.isascii() and text.isdigit()


def parse_positive_int(value: Any) -> Optional[int]:
    """Return value as an int in 1..MAX_INTEGER, or None when it is not one."""
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        text = value.strip()
        # Length check keeps int() away from the interpreter's digit limit
        if not _is_ascii_digits(text) or len(text.lstrip("0")) > len(str(MAX_INTEGER)):
            return None
        value = int(text)
    if isinstance(value, int) and 0 < value <= MAX_INTEGER:
        return value
    return None


def parse_pagination(page: Any, limit: Any) -> Tuple[int, int]:
    """
    Parse page and limit as positive integers.

    Raises:
        QueryParameterError: If either value is missing, non-numeric, <= 0
            or above MAX_INTEGER
    """
    parsed_page = parse_positive_int(page)
    parsed_limit = parse_positive_int(limit)
    if parsed_page is None or parsed_limit is None:
        raise QueryParameterError("Invalid pagination parameters")
    return parsed_page, parsed_limit


def parse_sort_direction(value: Any) -> str:
    """Return "ASC" or "DESC" for a case-insensitive order value."""
    if not isinstance(value, str) or value.upper() not in VALID_ORDERS:
        raise QueryParameterError("Invalid order parameter")
    return value.upper()


def parse_flag(value: Any) -> bool:
    """Interpret a 0/1 style include flag. Unparseable values are false."""
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        text = value.strip().lower()
        digits = text[1:] if text[:1] in ("-", "+") else text
        if _is_ascii_digits(digits):
            return digits.strip("0") != ""
        return text in _TRUE_FLAGS
    return False


def _parse_filter_id(value: Any, name: str) -> Optional[int]:
    if value is None or value == "":
        return None
    parsed = parse_positive_int(value)
    if parsed is None:
        raise QueryParameterError(f"Invalid {name} parameter")
    return parsed


def _search_year(term: str) -> Optional[int]:
    """The year a search term names, when the term is an integral number."""
    try:
        number = float(term)
    except ValueError:
        return None
    # Numbers outside the Integer column range never match a year
    if not number.is_integer() or abs(number) > MAX_INTEGER:
        return None
    return int(number)


def total_pages(total: int, limit: int) -> int:
    return math.ceil(total / limit)


@dataclass(frozen=True)
class MovieListParams:
    """Validated movie listing parameters."""
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT
    sort: str = DEFAULT_SORT
    order: str = DEFAULT_ORDER
    genre_id: Optional[int] = None
    director_id: Optional[int] = None
    search: Optional[str] = None
    actors_include: bool = True
    genres_include: bool = True

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    @property
    def load_genres(self) -> bool:
        # A genre filter always joins the genre association
        return self.genres_include or self.genre_id is not None

    @property
    def load_actors(self) -> bool:
        return self.actors_include

    def relations(self) -> Tuple[str, ...]:
        """Relations attached to each row before post-processing."""
        names = ["director"]
        if self.load_genres:
            names.append("genres")
        if self.load_actors:
            names.append("actors")
        return tuple(names)


def parse_movie_list_params(raw: Mapping[str, Any]) -> MovieListParams:
    """
    Validate raw listing parameters.

    Checks run in order: pagination, order, sort, then the id filters.

    Args:
        raw: Mapping of parameter names (page, limit, sort, order, genreId,
            directorId, search, actorsInclude, genresInclude) to raw values.
            Missing keys take the defaults.

    Returns:
        MovieListParams

    Raises:
        QueryParameterError: On the first invalid parameter
    """
    page, limit = parse_pagination(
        raw.get("page", DEFAULT_PAGE), raw.get("limit", DEFAULT_LIMIT)
    )
    order = parse_sort_direction(raw.get("order", DEFAULT_ORDER))

    sort = raw.get("sort", DEFAULT_SORT)
    if sort not in SORT_COLUMNS:
        raise QueryParameterError("Invalid sort field")

    genre_id = _parse_filter_id(raw.get("genreId"), "genreId")
    director_id = _parse_filter_id(raw.get("directorId"), "directorId")

    search = raw.get("search")
    if search is not None and not isinstance(search, str):
        search = str(search)

    return MovieListParams(
        page=page,
        limit=limit,
        sort=sort,
        order=order,
        genre_id=genre_id,
        director_id=director_id,
        search=search or None,
        actors_include=parse_flag(raw.get("actorsInclude", 1)),
        genres_include=parse_flag(raw.get("genresInclude", 1)),
    )


class MovieListQuery:
    """
    Builds the count and page statements for a validated listing.

    Both statements share the same WHERE clause, so the count ignores only
    pagination.
    """

    def __init__(self, params: MovieListParams):
        self.params = params

    def conditions(self) -> List[Any]:
        """
        WHERE clauses shared by the count and page statements.

        genreId selects movies through EXISTS on the genre association, so a
        matched movie still loads its full genre list rather than only the
        matched genre.
        """
        params = self.params
        conditions = []

        if params.director_id is not None:
            conditions.append(Movie.director_id == params.director_id)

        if params.genre_id is not None:
            conditions.append(Movie.genres.any(Genre.id == params.genre_id))

        if params.search:
            term = params.search
            matches = [
                Movie.title.icontains(term, autoescape=True),
                Movie.overview.icontains(term, autoescape=True),
            ]
            year = _search_year(term)
            if year is not None:
                matches.append(Movie.year == year)
            conditions.append(or_(*matches))

        return conditions

    def count_statement(self):
        return select(func.count(Movie.id)).where(*self.conditions())

    def page_statement(self):
        params = self.params
        column = SORT_COLUMNS[params.sort]
        ordering = column.desc() if params.order == "DESC" else column.asc()

        options = [joinedload(Movie.director)]
        if params.load_genres:
            options.append(selectinload(Movie.genres))
        if params.load_actors:
            options.append(selectinload(Movie.actors))

        return (
            select(Movie)
            .where(*self.conditions())
            .options(*options)
            .order_by(ordering, Movie.id.asc())
            .limit(params.limit)
            .offset(params.offset)
        )


def _strip_unrequested(row: Dict[str, Any], params: MovieListParams) -> Dict[str, Any]:
    if not params.actors_include:
        row.pop("actors", None)
    if not params.genres_include:
        row.pop("genres", None)
    return row


def run_movie_listing(session, params: MovieListParams) -> Dict[str, Any]:
    """
    Execute a validated listing and shape the page payload.

    Args:
        session: SQLAlchemy session
        params: Validated listing parameters

    Returns:
        Dict with total, page, totalPages and movies
    """
    query = MovieListQuery(params)
    total = session.scalar(query.count_statement()) or 0
    rows = session.scalars(query.page_statement()).unique().all()

    relations = params.relations()
    movies = [_strip_unrequested(movie.to_dict(include=relations), params) for movie in rows]

    return {
        "total": total,
        "page": params.page,
        "totalPages": total_pages(total, params.limit),
        "movies": movies,
    }
