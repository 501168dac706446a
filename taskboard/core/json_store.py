"""JSON file record store.

Keeps every collection in one JSON document, the same shape a json-server
``db.json`` has:

    {"users": [...], "boards": [...], ..., "_sequences": {"boards.id": 4}}

The document is loaded once and written back after every mutation through
a temp file and os.replace(), so a crash never leaves a half-written file.
A mutation whose write fails is undone in memory too. All access goes
through one lock, which also makes the users.email uniqueness check
atomic with the insert.
"""
import copy
import json
import logging
import os
import tempfile
import threading
from contextlib import contextmanager

from taskboard.core.exceptions import Conflict
from taskboard.core.record_store import RecordStore, COLLECTIONS

logger = logging.getLogger('taskboard.core.json_store')

SEQUENCES_KEY = '_sequences'

# Mirrors the UNIQUE constraints of the PostgreSQL schema
UNIQUE_FIELDS = {'users': ('email',)}


class JsonFileRecordStore(RecordStore):
    """Record store persisted to a single JSON file."""

    def __init__(self, path):
        self.path = path
        self._lock = threading.RLock()
        self._data = self._load()

    def _load(self):
        data = {}
        if os.path.exists(self.path):
            with open(self.path, 'r', encoding='utf-8') as f:
                content = f.read()
            if content.strip():
                data = json.loads(content)
            logger.info(f'Loaded JSON store from {self.path}')
        for collection in COLLECTIONS:
            data.setdefault(collection, [])
        data.setdefault(SEQUENCES_KEY, {})
        return data

    def _save(self):
        directory = os.path.dirname(os.path.abspath(self.path))
        fd, tmp_path = tempfile.mkstemp(dir=directory, prefix='.db-', suffix='.json')
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(self._data, f, indent=2)
            os.replace(tmp_path, self.path)
        except Exception:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise

    @staticmethod
    def _matches(record, criteria):
        return all(record.get(k) == v for k, v in criteria.items())

    def _rows(self, collection):
        self._check_collection(collection)
        return self._data[collection]

    def _next_value(self, name, floor=0):
        sequences = self._data[SEQUENCES_KEY]
        value = max(sequences.get(name, 0), floor) + 1
        sequences[name] = value
        return value

    @contextmanager
    def _writing(self):
        """Apply a mutation to the document and persist it.

        Caller holds the lock. If the write fails the in-memory document is
        put back as it was, so memory never runs ahead of the file.
        """
        snapshot = copy.deepcopy(self._data)
        try:
            yield
            self._save()
        except Exception:
            self._data = snapshot
            raise

    def _check_unique(self, collection, record):
        for field in UNIQUE_FIELDS.get(collection, ()):
            value = record.get(field)
            if value is not None and any(r.get(field) == value for r in self._data[collection]):
                logger.info(f'Unique clash on {collection}.{field}')
                raise Conflict(f'{collection[:-1].capitalize()} already exists')

    # --- RecordStore interface ---

    def find(self, collection, **criteria):
        with self._lock:
            for record in self._rows(collection):
                if self._matches(record, criteria):
                    return copy.deepcopy(record)
        return None

    def filter(self, collection, order_by=None, **criteria):
        with self._lock:
            rows = [copy.deepcopy(r) for r in self._rows(collection) if self._matches(r, criteria)]
        keys = order_by or ('id',)
        # None sorts first, matching NULLS FIRST on ascending order
        rows.sort(key=lambda r: tuple((r.get(k) is not None, r.get(k)) for k in keys))
        return rows

    def insert(self, collection, record):
        with self._lock:
            rows = self._rows(collection)
            self._check_unique(collection, record)
            max_id = max((r.get('id', 0) for r in rows), default=0)
            created = dict(record)
            with self._writing():
                created['id'] = self._next_value(f'{collection}.id', floor=max_id)
                self._data[collection].append(created)
            return copy.deepcopy(created)

    def update(self, collection, record_id, patch):
        with self._lock:
            for index, record in enumerate(self._rows(collection)):
                if record.get('id') == record_id:
                    updated = dict(record)
                    updated.update({k: v for k, v in patch.items() if k != 'id'})
                    with self._writing():
                        self._data[collection][index] = updated
                    return copy.deepcopy(updated)
        return None

    def remove(self, collection, **criteria):
        if not criteria:
            raise ValueError('remove() requires at least one criterion')
        with self._lock:
            rows = self._rows(collection)
            kept = [r for r in rows if not self._matches(r, criteria)]
            removed = len(rows) - len(kept)
            if removed:
                with self._writing():
                    self._data[collection] = kept
            return removed

    def count(self, collection, **criteria):
        with self._lock:
            return sum(1 for r in self._rows(collection) if self._matches(r, criteria))

    def next_sequence(self, name):
        with self._lock:
            with self._writing():
                value = self._next_value(name)
            return value
