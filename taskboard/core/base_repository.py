"""Base Repository — binds a repository to one record-store collection.

Usage:
    class ThingRepository(BaseRepository):
        collection = 'things'

        def get_by_owner(self, owner_id):
            return self.list_by(order_by=('sort_id', 'id'), owner_id=owner_id)

Store failures are logged and re-raised as InternalError; domain errors
raised by the store (Conflict) pass through untouched.
"""
import logging
from functools import wraps

from taskboard.core.exceptions import TaskboardError, InternalError

logger = logging.getLogger('taskboard.core.repository')


def _store_call(f):
    @wraps(f)
    def decorated(self, *args, **kwargs):
        try:
            return f(self, *args, **kwargs)
        except TaskboardError:
            raise
        except Exception as e:
            logger.exception(f'Record store failure in {type(self).__name__}.{f.__name__}')
            raise InternalError() from e
    return decorated


class BaseRepository:

    collection = None

    def __init__(self, store):
        self.store = store

    @_store_call
    def get_by_id(self, record_id):
        """Return one record by id, or None."""
        return self.store.find(self.collection, id=record_id)

    @_store_call
    def find_by(self, **criteria):
        return self.store.find(self.collection, **criteria)

    @_store_call
    def list_by(self, order_by=('sort_id', 'id'), **criteria):
        return self.store.filter(self.collection, order_by=order_by, **criteria)

    @_store_call
    def create(self, record):
        """Insert a record and return it with its allocated id."""
        return self.store.insert(self.collection, record)

    @_store_call
    def update(self, record_id, patch):
        """Apply a partial update. Returns the updated record, or None if missing."""
        return self.store.update(self.collection, record_id, patch)

    @_store_call
    def delete(self, record_id):
        """Delete a record. Returns True if a record was removed."""
        return self.store.remove(self.collection, id=record_id) > 0

    @_store_call
    def count(self, **criteria):
        return self.store.count(self.collection, **criteria)

    @_store_call
    def next_sequence(self, field='sort_id'):
        return self.store.next_sequence(f'{self.collection}.{field}')
