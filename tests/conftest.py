import pytest
from datetime import datetime

from cinecatalog.app import create_app
from cinecatalog.models import db, Actor, Director, Genre, Movie

TEST_CONFIG = {
    "TESTING": True,
    "SQLALCHEMY_DATABASE_URI": "sqlite:///:memory:",
    "SECRET_KEY": "test-secret-key",
}


@pytest.fixture(scope='function')
def app():
    """Create a fresh app on an in-memory database for each test."""
    flask_app = create_app(TEST_CONFIG)

    with flask_app.app_context():
        yield flask_app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture
def session(app):
    return db.session


def seed_catalog(session):
    """
    Insert a small catalog and return the created rows by name.

    Movies share one created_at so ordering ties fall back to id.
    """
    stamp = datetime(2024, 1, 1, 12, 0, 0)

    nolan = Director(name="Christopher Nolan")
    villeneuve = Director(name="Denis Villeneuve")
    action = Genre(name="Action")
    scifi = Genre(name="Sci-Fi")
    drama = Genre(name="Drama")
    dicaprio = Actor(name="Leonardo DiCaprio")
    hardy = Actor(name="Tom Hardy")
    adams = Actor(name="Amy Adams")

    inception = Movie(
        title="Inception", overview="A thief steals secrets through dream-sharing.",
        year=2010, votes=35000, rating=8.8, popularity=83.9, budget=160000000,
        director=nolan, genres=[action, scifi], actors=[dicaprio, hardy], created_at=stamp,
    )
    interstellar = Movie(
        title="Interstellar", overview="Explorers travel through a wormhole in space.",
        year=2014, votes=32000, rating=8.6, popularity=140.2, budget=165000000,
        director=nolan, genres=[scifi, drama], actors=[], created_at=stamp,
    )
    dune = Movie(
        title="Dune", overview="A noble family becomes embroiled in a war for a desert planet.",
        year=2021, votes=11000, rating=8.0, popularity=95.1, budget=165000000,
        director=villeneuve, genres=[scifi], actors=[], created_at=stamp,
    )
    arrival = Movie(
        title="Arrival", overview="A linguist works with the military to communicate with aliens.",
        year=2016, votes=17000, rating=7.9, popularity=40.5, budget=47000000,
        director=villeneuve, genres=[scifi, drama], actors=[adams], created_at=stamp,
    )

    session.add_all([inception, interstellar, dune, arrival])
    session.commit()

    return {
        "nolan": nolan, "villeneuve": villeneuve,
        "action": action, "scifi": scifi, "drama": drama,
        "dicaprio": dicaprio, "hardy": hardy, "adams": adams,
        "inception": inception, "interstellar": interstellar,
        "dune": dune, "arrival": arrival,
    }


@pytest.fixture
def catalog(session):
    """Seeded catalog rows."""
    return seed_catalog(session)
