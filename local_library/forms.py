from typing import NamedTuple

from flask_wtf import FlaskForm
from markupsafe import escape as html_escape
from wtforms import Field, StringField, TextAreaField
from wtforms.validators import Length

ABSENT = 'absent'
SINGLE = 'single'
MULTIPLE = 'multiple'


class Violation(NamedTuple):
    field: str
    message: str


class GenreSelection(NamedTuple):
    """Parsed ``genre`` submission: nothing, one id, or several ids."""
    kind: str
    ids: tuple


class GenreChoice(NamedTuple):
    genre: object
    checked: bool


def parse_genre_selection(values):
    """Normalize the raw ``genre`` values of a form post.

    A missing field gives an empty selection and a single value a
    one-element one. Repeated ids collapse, keeping first-seen order.
    """
    if values is None:
        values = []
    elif isinstance(values, str):
        values = [values]
    ids = tuple(dict.fromkeys(v for v in values if v))
    if not ids:
        return GenreSelection(ABSENT, ())
    if len(ids) == 1:
        return GenreSelection(SINGLE, ids)
    return GenreSelection(MULTIPLE, ids)


def genre_choices(all_genres, selected_ids):
    selected = {str(i) for i in selected_ids}
    return [GenreChoice(g, str(g.id) in selected) for g in all_genres]


# --- Filters ---
def trim(value):
    return value.strip() if isinstance(value, str) else value


def escape(value):
    if not value:
        return value
    return str(html_escape(value))


class GenreField(Field):
    """Multi-valued checkbox field holding the normalized genre ids."""

    def __init__(self, label=None, validators=None, **kwargs):
        super().__init__(label, validators, **kwargs)
        self.selection = GenreSelection(ABSENT, ())

    def process_formdata(self, valuelist):
        self.selection = parse_genre_selection(valuelist)
        self.data = [escape(i) for i in self.selection.ids]


class BookForm(FlaskForm):
    # Lengths are checked on the escaped value, which is what gets stored.
    title = StringField('Title', filters=[trim, escape], validators=[
        Length(min=1, message='Title must not be empty'),
        Length(max=250, message='Title must be at most 250 characters.')])
    author = StringField('Author', filters=[trim, escape], validators=[
        Length(min=1, message='Author must not be empty.'),
        Length(max=32, message='Author must be a valid author id.')])
    summary = TextAreaField('Summary', filters=[trim, escape],
                            validators=[Length(min=1, message='Summary must not be empty.')])
    isbn = StringField('ISBN', filters=[trim, escape], validators=[
        Length(min=1, message='ISBN must not be empty'),
        Length(max=32, message='ISBN must be at most 32 characters.')])
    genre = GenreField('Genre', default=list)

    def violations(self):
        """Collected errors as a flat list, in field declaration order."""
        found = []
        for field in self:
            for message in field.errors:
                found.append(Violation(field.name, message))
        return found
