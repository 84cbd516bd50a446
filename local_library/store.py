"""
Entity store for the catalog models.

A thin layer over the Flask-SQLAlchemy session exposing the operations the
controllers need: counting, finding (with projection, sort and reference
resolution), saving, updating and removing records by id. Store errors
(``sqlalchemy.exc.SQLAlchemyError``) are not caught here.
"""
from typing import Iterable, Optional, Sequence

from sqlalchemy.orm import load_only, selectinload


class EntityStore:

    def __init__(self, db):
        self.db = db

    @property
    def session(self):
        return self.db.session

    def count_documents(self, model, **filters) -> int:
        return model.query.filter_by(**filters).count()

    def find(self, model, filters: Optional[dict] = None, fields: Optional[Sequence[str]] = None,
             sort: Optional[Sequence[str]] = None, populate: Iterable[str] = ()):
        """Return every record of ``model`` matching ``filters``.

        ``fields`` restricts the loaded columns (the primary key is always
        loaded), ``sort`` lists column names, ``-name`` meaning descending,
        and ``populate`` names relationships to load alongside the records.
        """
        query = model.query.filter_by(**(filters or {}))
        if fields:
            query = query.options(load_only(*[getattr(model, f) for f in fields]))
        query = query.options(*self._populate(model, populate))
        for key in sort or ():
            if key.startswith('-'):
                query = query.order_by(getattr(model, key[1:]).desc())
            else:
                query = query.order_by(getattr(model, key).asc())
        return query.all()

    def find_by_ids(self, model, ids: Iterable[str]):
        ids = list(ids)
        if not ids:
            return []
        return model.query.filter(model.id.in_(ids)).all()

    def find_by_id(self, model, record_id, populate: Iterable[str] = ()):
        if not record_id:
            return None
        return self.session.get(model, record_id, options=self._populate(model, populate))

    def save(self, record):
        self.session.add(record)
        self.session.commit()
        return record

    def find_by_id_and_update(self, model, record_id, values: dict):
        record = self.find_by_id(model, record_id)
        if record is None:
            return None
        for key, value in values.items():
            setattr(record, key, value)
        self.session.commit()
        return record

    def find_by_id_and_remove(self, model, record_id):
        # Removing an id that no longer exists is a no-op.
        record = self.find_by_id(model, record_id)
        if record is None:
            return None
        self.session.delete(record)
        self.session.commit()
        return record

    @staticmethod
    def _populate(model, names):
        return [selectinload(getattr(model, name)) for name in names]
