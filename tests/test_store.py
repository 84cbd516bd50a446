# tests/test_store.py
import pytest

from local_library.models import Author, Book, BookInstance, Genre, db
from local_library.store import EntityStore


@pytest.fixture
def store(app, catalog):
    with app.app_context():
        yield EntityStore(db)


def test_count_documents(store):
    assert store.count_documents(Book) == 2
    assert store.count_documents(BookInstance) == 3
    assert store.count_documents(BookInstance, status="Available") == 1


def test_find_sorts_and_populates(store, catalog):
    store.save(Book(title="Anathem", author_id=catalog["herbert"], summary="Maths.", isbn="1"))

    books = store.find(Book, fields=("title", "author_id"), sort=("title",), populate=("author",))

    assert [b.title for b in books] == ["Anathem", "Dune", "Emma"]
    assert books[1].author.family_name == "Herbert"


def test_find_descending_with_filter(store, catalog):
    instances = store.find(BookInstance, filters={"book_id": catalog["dune"]}, sort=("-imprint",))

    assert [i.imprint for i in instances] == ["Ace, 2005", "Ace, 1990"]


def test_find_by_id(store, catalog):
    book = store.find_by_id(Book, catalog["dune"], populate=("author", "genres"))

    assert book.title == "Dune"
    assert sorted(g.name for g in book.genres) == ["Fiction", "Science Fiction"]
    assert store.find_by_id(Book, "missing") is None
    assert store.find_by_id(Book, None) is None


def test_find_by_ids_skips_unknown(store, catalog):
    genres = store.find_by_ids(Genre, [catalog["sci_fi"], "missing"])

    assert [g.name for g in genres] == ["Science Fiction"]
    assert store.find_by_ids(Genre, []) == []


def test_save_generates_id(store, catalog):
    author = store.save(Author(first_name="Ursula", family_name="Le Guin"))

    assert len(author.id) == 32
    assert author.name == "Le Guin, Ursula"


def test_find_by_id_and_update(store, catalog):
    updated = store.find_by_id_and_update(Book, catalog["emma"], {"title": "Emma (2nd ed.)"})

    assert updated.title == "Emma (2nd ed.)"
    assert store.find_by_id_and_update(Book, "missing", {"title": "x"}) is None


def test_find_by_id_and_remove_is_idempotent(store, catalog):
    removed = store.find_by_id_and_remove(Book, catalog["dune"])

    assert removed is not None
    assert store.find_by_id(Book, catalog["dune"]) is None
    assert store.find_by_id_and_remove(Book, catalog["dune"]) is None
    # copies are left in place
    assert store.count_documents(BookInstance, book_id=catalog["dune"]) == 2
