from datetime import date

import click

from .models import Author, Book, BookInstance, Genre, db


def seed_catalog():
    """Insert a small sample catalog. Returns False if data already exists."""
    if Author.query.first():
        return False
    austen = Author(first_name="Jane", family_name="Austen", date_of_birth=date(1775, 12, 16),
                    date_of_death=date(1817, 7, 18))
    herbert = Author(first_name="Frank", family_name="Herbert", date_of_birth=date(1920, 10, 8),
                     date_of_death=date(1986, 2, 11))
    le_guin = Author(first_name="Ursula", family_name="Le Guin", date_of_birth=date(1929, 10, 21))
    fiction = Genre(name="Fiction")
    sci_fi = Genre(name="Science Fiction")
    fantasy = Genre(name="Fantasy")
    db.session.add_all([austen, herbert, le_guin, fiction, sci_fi, fantasy])
    db.session.flush()

    pride = Book(title="Pride and Prejudice", author=austen, isbn="9780141439518",
                 summary="A novel of manners following Elizabeth Bennet.", genres=[fiction])
    dune = Book(title="Dune", author=herbert, isbn="0441013597",
                summary="A desert planet, a noble house, and the spice melange.",
                genres=[fiction, sci_fi])
    earthsea = Book(title="A Wizard of Earthsea", author=le_guin, isbn="9780547773742",
                    summary="A young mage learns the price of power.", genres=[fantasy])
    db.session.add_all([pride, dune, earthsea])
    db.session.flush()

    db.session.add_all([
        BookInstance(book=pride, imprint="Penguin Classics, 2002", status="Available"),
        BookInstance(book=dune, imprint="Ace, 2005", status="Available"),
        BookInstance(book=dune, imprint="Ace, 1990", status="Loaned", due_back=date(2026, 11, 1)),
        BookInstance(book=earthsea, imprint="Clarion, 2012", status="Maintenance"),
    ])
    db.session.commit()
    return True


def register_commands(app):

    @app.cli.command("init-db")
    @click.option("--drop", is_flag=True, help="Drop existing tables first.")
    def init_db(drop):
        """Create the tables and add sample data (for dev only)."""
        if drop:
            db.drop_all()
        db.create_all()
        if seed_catalog():
            click.echo("Initialized DB with sample data.")
        else:
            click.echo("DB already initialized.")
