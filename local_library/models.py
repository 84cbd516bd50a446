from uuid import uuid4

from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()

BOOK_INSTANCE_STATUSES = ('Available', 'Maintenance', 'Loaned', 'Reserved')


def new_id():
    return uuid4().hex


book_genres = db.Table(
    'book_genres',
    db.Column('book_id', db.String(32), db.ForeignKey('books.id'), primary_key=True),
    db.Column('genre_id', db.String(32), db.ForeignKey('genres.id'), primary_key=True),
)


# --- Models ---
class Author(db.Model):
    __tablename__ = 'authors'
    id = db.Column(db.String(32), primary_key=True, default=new_id)
    first_name = db.Column(db.String(100), nullable=False)
    family_name = db.Column(db.String(100), nullable=False, index=True)
    date_of_birth = db.Column(db.Date)
    date_of_death = db.Column(db.Date)

    @property
    def name(self):
        return f"{self.family_name}, {self.first_name}"

    def __repr__(self):
        return f"<Author id={self.id} name='{self.name}'>"


class Genre(db.Model):
    __tablename__ = 'genres'
    id = db.Column(db.String(32), primary_key=True, default=new_id)
    name = db.Column(db.String(100), nullable=False, index=True)

    def __repr__(self):
        return f"<Genre id={self.id} name='{self.name}'>"


class Book(db.Model):
    __tablename__ = 'books'
    id = db.Column(db.String(32), primary_key=True, default=new_id)
    title = db.Column(db.String(250), nullable=False, index=True)
    author_id = db.Column(db.String(32), db.ForeignKey('authors.id'), nullable=False)
    summary = db.Column(db.Text, nullable=False)
    isbn = db.Column(db.String(32), nullable=False)

    author = db.relationship('Author')
    genres = db.relationship('Genre', secondary=book_genres, order_by='Genre.name')

    @property
    def url(self):
        return f"/catalog/book/{self.id}"

    def __repr__(self):
        return f"<Book id={self.id} title='{self.title}'>"


class BookInstance(db.Model):
    """A lendable copy of a book.

    Only the instance side knows about the book, so removing a book never
    touches its copies.
    """
    __tablename__ = 'book_instances'
    id = db.Column(db.String(32), primary_key=True, default=new_id)
    book_id = db.Column(db.String(32), db.ForeignKey('books.id'), nullable=False, index=True)
    imprint = db.Column(db.String(250), nullable=False)
    status = db.Column(db.Enum(*BOOK_INSTANCE_STATUSES, name='book_instance_status'),
                       nullable=False, default='Maintenance', index=True)
    due_back = db.Column(db.Date)

    book = db.relationship('Book')

    def __repr__(self):
        return f"<BookInstance id={self.id} status='{self.status}'>"
