"""
SoftDeleteFilter wraps a DBStorage and hides soft-deleted rows.

For models using SoftDeleteMixin:
  - query() / get() / count() add `deleted_at IS NULL`
  - delete() sets deleted_at instead of removing the row
Other models pass straight through, and every other storage method is
delegated to the wrapped instance.
"""
from __future__ import annotations

from models.base_model import SoftDeleteMixin


def _soft_deletable(cls) -> bool:
    return isinstance(cls, type) and issubclass(cls, SoftDeleteMixin)


class SoftDeleteFilter:
    def __init__(self, storage):
        self._storage = storage

    @property
    def wrapped(self):
        return self._storage

    def query(self, cls):
        query = self._storage.get_session().query(cls)
        if _soft_deletable(cls):
            query = query.filter(cls.deleted_at.is_(None))
        return query

    def get(self, cls, id):
        return self.query(cls).filter(cls.id == id).first()

    def count(self, cls):
        return self.query(cls).count()

    def delete(self, obj=None):
        if obj is None:
            return
        if isinstance(obj, SoftDeleteMixin):
            obj.mark_deleted()
            self._storage.new(obj)
        else:
            self._storage.delete(obj)

    def __getattr__(self, name):
        return getattr(self._storage, name)
