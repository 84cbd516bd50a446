"""
Book controller and the ``/catalog`` blueprint.

``BookController`` holds the store and renderer it works with; the blueprint
routes only look the controller up on the current app and delegate to it.
"""
from dataclasses import dataclass, field
from typing import List

from flask import Blueprint, abort, current_app, redirect, request

from .forms import BookForm, genre_choices
from .models import Author, Book, BookInstance, Genre, new_id


@dataclass
class BookSubmission:
    """Candidate book built from a form post, before it is persisted."""
    id: str
    title: str
    author_id: str
    summary: str
    isbn: str
    genre_ids: List[str] = field(default_factory=list)

    @classmethod
    def from_form(cls, form, book_id=None):
        return cls(
            id=book_id or new_id(),
            title=form.title.data,
            author_id=form.author.data,
            summary=form.summary.data,
            isbn=form.isbn.data,
            genre_ids=list(form.genre.data or []),
        )

    @property
    def url(self):
        return f"/catalog/book/{self.id}"


class BookController:

    def __init__(self, store, render):
        self.store = store
        self.render = render

    @property
    def log(self):
        return current_app.logger

    # --- Dashboard ---
    def index(self):
        counts = self._gather(
            lambda: self.store.count_documents(Book),
            lambda: self.store.count_documents(BookInstance),
            lambda: self.store.count_documents(BookInstance, status='Available'),
            lambda: self.store.count_documents(Author),
            lambda: self.store.count_documents(Genre),
        )
        num_books, num_instances, num_available, num_authors, num_genres = counts
        return self.render(
            'index.html',
            title='Local Library Home',
            book_count=num_books,
            book_instance_count=num_instances,
            book_instance_available_count=num_available,
            author_count=num_authors,
            genre_count=num_genres,
        )

    # --- Read views ---
    def book_list(self):
        all_books = self.store.find(Book, fields=('title', 'author_id'), sort=('title',),
                                    populate=('author',))
        return self.render('book_list.html', title='Book List', book_list=all_books)

    def book_detail(self, book_id):
        book, book_instances = self._book_with_instances(book_id)
        if book is None:
            self._not_found(book_id)
        return self.render('book_detail.html', title=book.title, book=book,
                           book_instances=book_instances)

    # --- Create ---
    def book_create_get(self):
        all_authors, all_genres = self._authors_and_genres()
        return self.render('book_form.html', title='Create Book', authors=all_authors,
                           genres=genre_choices(all_genres, []))

    def book_create_post(self):
        form = BookForm()
        valid = form.validate()
        book = BookSubmission.from_form(form)

        if not valid:
            return self._render_invalid('Create Book', book, form)

        saved = self.store.save(Book(
            id=book.id,
            title=book.title,
            author_id=book.author_id,
            summary=book.summary,
            isbn=book.isbn,
            genres=self.store.find_by_ids(Genre, book.genre_ids),
        ))
        self.log.info("Created book %s (%s)", saved.id, saved.title)
        return redirect(saved.url)

    # --- Delete ---
    def book_delete_get(self, book_id):
        book, book_instances = self._book_with_instances(book_id)
        if book is None:
            return redirect('/catalog/books')
        return self.render('book_delete.html', title='Delete Book', book=book,
                           book_instances=book_instances)

    def book_delete_post(self):
        # The id comes from the form body, not from the URL.
        book_id = request.form.get('bookid')
        removed = self.store.find_by_id_and_remove(Book, book_id)
        if removed is not None:
            self.log.info("Deleted book %s", book_id)
        return redirect('/catalog/books')

    # --- Update ---
    def book_update_get(self, book_id):
        book, all_authors, all_genres = self._gather(
            lambda: self.store.find_by_id(Book, book_id, populate=('author', 'genres')),
            lambda: self.store.find(Author, sort=('family_name',)),
            lambda: self.store.find(Genre, sort=('name',)),
        )
        if book is None:
            self._not_found(book_id)
        return self.render('book_form.html', title='Update Book', authors=all_authors,
                           genres=genre_choices(all_genres, [g.id for g in book.genres]),
                           book=book)

    def book_update_post(self, book_id):
        form = BookForm()
        valid = form.validate()
        book = BookSubmission.from_form(form, book_id=book_id)

        if not valid:
            return self._render_invalid('Update Book', book, form)

        updated = self.store.find_by_id_and_update(Book, book_id, {
            'title': book.title,
            'author_id': book.author_id,
            'summary': book.summary,
            'isbn': book.isbn,
            'genres': self.store.find_by_ids(Genre, book.genre_ids),
        })
        if updated is None:
            self._not_found(book_id)
        self.log.info("Updated book %s (%s)", updated.id, updated.title)
        return redirect(updated.url)

    # --- Helpers ---
    @staticmethod
    def _gather(*queries):
        """Run a handler's independent reads one after another on the request's
        session and return all results; any failure fails the group."""
        return [query() for query in queries]

    def _authors_and_genres(self):
        return self._gather(
            lambda: self.store.find(Author, sort=('family_name',)),
            lambda: self.store.find(Genre, sort=('name',)),
        )

    def _book_with_instances(self, book_id):
        return self._gather(
            lambda: self.store.find_by_id(Book, book_id, populate=('author', 'genres')),
            lambda: self.store.find(BookInstance, filters={'book_id': book_id}),
        )

    def _render_invalid(self, title, book, form):
        all_authors, all_genres = self._authors_and_genres()
        errors = form.violations()
        self.log.debug("Rejected book form for %s: %s", book.id, errors)
        return self.render('book_form.html', title=title, authors=all_authors,
                           genres=genre_choices(all_genres, book.genre_ids),
                           book=book, errors=errors)

    def _not_found(self, book_id):
        self.log.warning("Book %s not found", book_id)
        abort(404, 'Book not found')


# --- Routes ---
catalog_bp = Blueprint('catalog', __name__, url_prefix='/catalog')


def get_controller():
    return current_app.extensions['book_controller']


@catalog_bp.route('/')
def index():
    return get_controller().index()


@catalog_bp.route('/books')
def book_list():
    return get_controller().book_list()


@catalog_bp.route('/book/create', methods=['GET', 'POST'])
def book_create():
    if request.method == 'POST':
        return get_controller().book_create_post()
    return get_controller().book_create_get()


@catalog_bp.route('/book/<book_id>')
def book_detail(book_id):
    return get_controller().book_detail(book_id)


@catalog_bp.route('/book/<book_id>/delete', methods=['GET', 'POST'])
def book_delete(book_id):
    if request.method == 'POST':
        return get_controller().book_delete_post()
    return get_controller().book_delete_get(book_id)


@catalog_bp.route('/book/<book_id>/update', methods=['GET', 'POST'])
def book_update(book_id):
    if request.method == 'POST':
        return get_controller().book_update_post(book_id)
    return get_controller().book_update_get(book_id)
