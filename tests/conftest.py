# tests/conftest.py
import pytest

from local_library import create_app
from local_library.models import Author, Book, BookInstance, Genre, db


class RecordingRenderer:
    """Stands in for render_template and keeps every call."""

    def __init__(self):
        self.calls = []

    def __call__(self, template, **context):
        self.calls.append((template, context))
        return f"rendered {template}"

    @property
    def last(self):
        return self.calls[-1]


def _config(tmp_path):
    return {
        "TESTING": True,
        "SECRET_KEY": "test-secret",
        "WTF_CSRF_ENABLED": False,
        "SQLALCHEMY_DATABASE_URI": f"sqlite:///{tmp_path / 'test.db'}",
    }


def _build(config, renderer=None):
    app = create_app(config, renderer=renderer)
    with app.app_context():
        db.create_all()
    return app


@pytest.fixture
def app(tmp_path):
    app = _build(_config(tmp_path))
    yield app
    with app.app_context():
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def renderer():
    return RecordingRenderer()


@pytest.fixture
def recorded_app(tmp_path, renderer):
    """App whose controller renders through ``renderer``."""
    app = _build(_config(tmp_path), renderer)
    yield app
    with app.app_context():
        db.drop_all()


@pytest.fixture
def recorded_client(recorded_app):
    return recorded_app.test_client()


def _seed(app):
    with app.app_context():
        herbert = Author(first_name="Frank", family_name="Herbert")
        austen = Author(first_name="Jane", family_name="Austen")
        sci_fi = Genre(name="Science Fiction")
        fiction = Genre(name="Fiction")
        db.session.add_all([herbert, austen, sci_fi, fiction])
        db.session.flush()
        dune = Book(title="Dune", author=herbert, summary="Spice.", isbn="0441013597",
                    genres=[sci_fi, fiction])
        emma = Book(title="Emma", author=austen, summary="Matchmaking.", isbn="9780141439587")
        db.session.add_all([dune, emma])
        db.session.flush()
        db.session.add_all([
            BookInstance(book=dune, imprint="Ace, 2005", status="Available"),
            BookInstance(book=dune, imprint="Ace, 1990", status="Loaned"),
            BookInstance(book=emma, imprint="Penguin, 2003", status="Maintenance"),
        ])
        db.session.commit()
        return {
            "herbert": herbert.id,
            "austen": austen.id,
            "sci_fi": sci_fi.id,
            "fiction": fiction.id,
            "dune": dune.id,
            "emma": emma.id,
        }


@pytest.fixture
def catalog(app):
    return _seed(app)


@pytest.fixture
def recorded_catalog(recorded_app):
    return _seed(recorded_app)
