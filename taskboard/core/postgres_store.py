"""PostgreSQL record store.

Each collection is a table (see migrations/init_schema.py). Connection
handling follows the query_one()/query_all()/execute() pattern: get_db(),
get_cursor(), release_db() in try/finally.
"""
import logging

import psycopg2
import psycopg2.errors
from psycopg2.extras import Json

from taskboard.core.database import get_db, get_cursor, release_db, dict_from_row, ping_db
from taskboard.core.exceptions import Conflict
from taskboard.core.record_store import RecordStore

logger = logging.getLogger('taskboard.core.postgres_store')

# Writable/filterable columns per table. Column names are interpolated into
# SQL, so nothing outside this map may reach a statement.
COLUMNS = {
    'users': ('id', 'username', 'firstname', 'lastname', 'email', 'password_hash',
              'age', 'gender', 'created_at'),
    'boards': ('id', 'name', 'background', 'user_id', 'sort_id'),
    'categories': ('id', 'name', 'board_id', 'sort_id'),
    'tasks': ('id', 'name', 'description', 'category_id', 'sort_id'),
    'comments': ('id', 'task_id', 'comment', 'user_info', 'date'),
}

JSON_COLUMNS = {'user_info'}


class PostgresRecordStore(RecordStore):
    """Record store backed by the psycopg2 connection pool."""

    # --- statement execution ---
    # Every public method borrows one pooled connection per statement and
    # returns it before the method returns, so a store call never holds a
    # connection across calls.

    def query_one(self, sql, params=None):
        """First row of a SELECT as a plain dict, or None when nothing matches."""
        rows = self._read(sql, params, many=False)
        return rows[0] if rows else None

    def query_all(self, sql, params=None):
        """Every row of a SELECT, in the order the statement asked for."""
        return self._read(sql, params, many=True)

    def _read(self, sql, params, many):
        conn = get_db()
        try:
            cursor = get_cursor(conn)
            cursor.execute(sql, params or ())
            rows = cursor.fetchall() if many else [cursor.fetchone()]
            return [dict_from_row(r) for r in rows if r is not None]
        finally:
            release_db(conn)

    def execute(self, sql, params=None, returning=False):
        """Run one INSERT, UPDATE or DELETE in its own transaction.

        With returning=True the statement must end in RETURNING; the first
        returned row comes back as a record dict (None when no row matched,
        e.g. an UPDATE of a missing id). Otherwise the affected row count is
        returned. On any error the transaction is rolled back and the
        psycopg2 exception propagates for the caller to translate.
        """
        conn = get_db()
        try:
            cursor = get_cursor(conn)
            cursor.execute(sql, params or ())
            result = dict_from_row(cursor.fetchone()) if returning else cursor.rowcount
            conn.commit()
            return result
        except Exception:
            conn.rollback()
            raise
        finally:
            release_db(conn)

    # --- helpers ---

    def _columns(self, collection, names):
        self._check_collection(collection)
        allowed = COLUMNS[collection]
        for name in names:
            if name not in allowed:
                raise ValueError(f"Unknown field '{name}' for {collection}")
        return list(names)

    def _where(self, collection, criteria):
        columns = self._columns(collection, criteria.keys())
        if not columns:
            return '', []
        clause = ' AND '.join(f'{c} = %s' for c in columns)
        return f' WHERE {clause}', [criteria[c] for c in columns]

    @staticmethod
    def _adapt(column, value):
        if column in JSON_COLUMNS and value is not None:
            return Json(value)
        return value

    # --- RecordStore interface ---

    def find(self, collection, **criteria):
        where, params = self._where(collection, criteria)
        return self.query_one(f'SELECT * FROM {collection}{where} ORDER BY id LIMIT 1', params)

    def filter(self, collection, order_by=None, **criteria):
        where, params = self._where(collection, criteria)
        order = self._columns(collection, order_by or ('id',))
        return self.query_all(
            f"SELECT * FROM {collection}{where} ORDER BY {', '.join(order)}", params)

    def insert(self, collection, record):
        fields = {k: v for k, v in record.items() if k != 'id'}
        columns = self._columns(collection, fields.keys())
        placeholders = ', '.join(['%s'] * len(columns))
        try:
            return self.execute(
                f"INSERT INTO {collection} ({', '.join(columns)}) VALUES ({placeholders}) RETURNING *",
                [self._adapt(c, fields[c]) for c in columns],
                returning=True
            )
        except psycopg2.errors.UniqueViolation:
            logger.info(f'Unique violation on {collection}')
            raise Conflict(f'{collection[:-1].capitalize()} already exists')

    def update(self, collection, record_id, patch):
        fields = {k: v for k, v in patch.items() if k != 'id'}
        if not fields:
            return self.find(collection, id=record_id)
        columns = self._columns(collection, fields.keys())
        assignments = ', '.join(f'{c} = %s' for c in columns)
        params = [self._adapt(c, fields[c]) for c in columns]
        params.append(record_id)
        return self.execute(
            f'UPDATE {collection} SET {assignments} WHERE id = %s RETURNING *',
            params, returning=True
        )

    def remove(self, collection, **criteria):
        if not criteria:
            raise ValueError('remove() requires at least one criterion')
        where, params = self._where(collection, criteria)
        return self.execute(f'DELETE FROM {collection}{where}', params)

    def count(self, collection, **criteria):
        where, params = self._where(collection, criteria)
        row = self.query_one(f'SELECT COUNT(*) AS count FROM {collection}{where}', params)
        return row['count'] if row else 0

    def next_sequence(self, name):
        row = self.execute('''
            INSERT INTO record_sequences (name, value) VALUES (%s, 1)
            ON CONFLICT (name) DO UPDATE SET value = record_sequences.value + 1
            RETURNING value
        ''', (name,), returning=True)
        return row['value']

    def ping(self):
        return ping_db()
