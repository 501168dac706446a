"""Taskboard Core Database Module.

PostgreSQL connection pool and row helpers used by PostgresRecordStore.
The pool is configured once at startup by init_pool() and created lazily
on first use.
"""
import logging
from contextlib import contextmanager
from datetime import date, datetime

import psycopg2
from psycopg2 import pool
from psycopg2.extras import RealDictCursor

from taskboard.core.exceptions import ConfigurationError

logger = logging.getLogger('taskboard.core.database')

_connection_pool = None
_pool_settings = {}


def init_pool(dsn, min_conn=1, max_conn=10):
    """Record pool settings. The pool itself is created on first get_db()."""
    if not dsn:
        raise ConfigurationError('DATABASE_URL is required for the postgres store')
    close_pool()
    _pool_settings.update(dsn=dsn, minconn=min_conn, maxconn=max_conn)


def close_pool():
    """Close every pooled connection."""
    global _connection_pool
    if _connection_pool is not None:
        _connection_pool.closeall()
        _connection_pool = None


def _get_pool():
    """Get or create the connection pool (lazy initialization)."""
    global _connection_pool
    if _connection_pool is None:
        if not _pool_settings.get('dsn'):
            raise ConfigurationError('Database pool used before init_pool()')
        # Keepalives stop idle connections from being dropped by the server
        _connection_pool = pool.ThreadedConnectionPool(
            minconn=_pool_settings['minconn'],
            maxconn=_pool_settings['maxconn'],
            dsn=_pool_settings['dsn'],
            keepalives=1,
            keepalives_idle=30,
            keepalives_interval=10,
            keepalives_count=5
        )
    return _connection_pool


HEALTH_CHECK_ATTEMPTS = 3


def _is_alive(conn):
    try:
        with conn.cursor() as cur:
            cur.execute('SELECT 1')
        conn.rollback()
        return True
    except (psycopg2.OperationalError, psycopg2.InterfaceError) as e:
        logger.warning(f'Pooled connection is dead: {e}')
        return False


def get_db():
    """Borrow a live connection from the pool.

    Connections the server has closed while idle are dropped from the pool
    and replaced, up to HEALTH_CHECK_ATTEMPTS times.
    """
    db_pool = _get_pool()
    for _ in range(HEALTH_CHECK_ATTEMPTS):
        conn = db_pool.getconn()
        if _is_alive(conn):
            return conn
        db_pool.putconn(conn, close=True)
    raise psycopg2.OperationalError(
        f'No live database connection after {HEALTH_CHECK_ATTEMPTS} attempts')


def release_db(conn):
    """Return a borrowed connection to the pool."""
    if conn is not None and _connection_pool is not None:
        _connection_pool.putconn(conn)


@contextmanager
def transaction():
    """Borrow a connection for several statements that commit together.

        with transaction() as conn:
            create_schema(get_cursor(conn))
    """
    conn = get_db()
    try:
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        logger.warning('Transaction rolled back')
        raise
    finally:
        release_db(conn)


def ping_db():
    """True when a connection can be borrowed and answers SELECT 1."""
    try:
        release_db(get_db())
        return True
    except (psycopg2.Error, ConfigurationError) as e:
        logger.warning(f'Database ping failed: {e}')
        return False


def get_cursor(conn):
    """Cursor returning rows as dicts keyed by column name."""
    return conn.cursor(cursor_factory=RealDictCursor)


def dict_from_row(row):
    """Plain dict for a RealDictRow.

    TIMESTAMPTZ columns (users.created_at, comments.date) become ISO-8601
    strings so records look the same from either store. JSONB columns
    already arrive as dicts.
    """
    if row is None:
        return None
    record = dict(row)
    for key, value in record.items():
        if isinstance(value, (datetime, date)):
            record[key] = value.isoformat()
    return record
