"""
Local Library catalog.

Flask application for library staff: a dashboard with catalog counts, a book
list and detail pages, and create/update/delete forms for books referencing
authors and genres.

Run:
    pip install -e .
    flask --app local_library init-db
    flask --app local_library run

Open http://127.0.0.1:5000/catalog/
"""
import os

from flask import Flask, redirect, render_template
from flask_wtf import CSRFProtect
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException

from .book_controller import BookController, catalog_bp
from .models import db
from .store import EntityStore

csrf = CSRFProtect()


def create_app(test_config=None, renderer=None):
    """Build the app. ``renderer`` replaces ``flask.render_template``."""
    app = Flask(__name__, instance_relative_config=True)

    # --- Config ---
    os.makedirs(app.instance_path, exist_ok=True)
    app.config.from_mapping(
        SECRET_KEY=os.environ.get('LIBRARY_SECRET') or 'dev-secret-change-me',
        SQLALCHEMY_DATABASE_URI=os.environ.get('DATABASE_URL')
        or f"sqlite:///{os.path.join(app.instance_path, 'library.db')}",
        SQLALCHEMY_TRACK_MODIFICATIONS=False,
        LOG_LEVEL=os.environ.get('LIBRARY_LOG_LEVEL', 'INFO'),
    )
    if test_config:
        app.config.update(test_config)
    app.logger.setLevel(app.config['LOG_LEVEL'])

    db.init_app(app)
    csrf.init_app(app)

    app.extensions['book_controller'] = BookController(EntityStore(db), renderer or render_template)
    app.register_blueprint(catalog_bp)

    @app.route('/')
    def home():
        return redirect('/catalog/')

    register_error_handlers(app)

    from .seed import register_commands
    register_commands(app)

    return app


def register_error_handlers(app):

    @app.errorhandler(HTTPException)
    def http_error(e):
        return render_template('error.html', title=e.name, status=e.code,
                               message=e.description), e.code

    @app.errorhandler(SQLAlchemyError)
    def store_error(e):
        db.session.rollback()
        app.logger.exception("Database error")
        return render_template('error.html', title='Database error', status=500,
                               message='The catalog could not be read or updated.'), 500
