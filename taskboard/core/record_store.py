"""Record Store — generic collection operations over named collections.

Repositories depend only on this interface:

    store.find('boards', id=3, user_id=7)          -> dict or None
    store.filter('boards', order_by=('sort_id', 'id'), user_id=7)  -> [dict]
    store.insert('boards', {'name': 'B1', ...})    -> dict (with id)
    store.update('boards', 3, {'name': 'B2'})      -> dict or None
    store.remove('boards', id=3)                   -> int (rows removed)
    store.count('boards')                          -> int
    store.next_sequence('boards.sort_id')          -> int

Criteria are equality matches joined with AND. Ids are allocated by the
store from an atomic per-collection sequence.
"""
from taskboard.core.exceptions import ConfigurationError

COLLECTIONS = ('users', 'boards', 'categories', 'tasks', 'comments')


class RecordStore:
    """Interface implemented by PostgresRecordStore and JsonFileRecordStore."""

    collections = COLLECTIONS

    def _check_collection(self, collection):
        if collection not in self.collections:
            raise ValueError(f"Unknown collection '{collection}'")

    def find(self, collection, **criteria):
        raise NotImplementedError

    def filter(self, collection, order_by=None, **criteria):
        raise NotImplementedError

    def insert(self, collection, record):
        raise NotImplementedError

    def update(self, collection, record_id, patch):
        raise NotImplementedError

    def remove(self, collection, **criteria):
        raise NotImplementedError

    def count(self, collection, **criteria):
        raise NotImplementedError

    def next_sequence(self, name):
        raise NotImplementedError

    def ping(self):
        return True


def create_store(config):
    """Build the record store selected by config.STORE_BACKEND."""
    backend = config.STORE_BACKEND
    if backend == 'postgres':
        from taskboard.core import database
        from taskboard.core.postgres_store import PostgresRecordStore
        database.init_pool(config.DATABASE_URL, config.DB_POOL_MIN_CONN, config.DB_POOL_MAX_CONN)
        return PostgresRecordStore()
    if backend == 'json':
        from taskboard.core.json_store import JsonFileRecordStore
        return JsonFileRecordStore(config.JSON_STORE_PATH)
    raise ConfigurationError(f"Unknown STORE_BACKEND '{backend}'")
