"""Database schema initialization.

CREATE TABLE / CREATE INDEX statements for the PostgreSQL record store.
Run through ``flask --app taskboard.app init-db``.
"""
import logging

from taskboard.core.database import transaction, get_cursor

logger = logging.getLogger('taskboard.migrations')


def create_schema(cursor):
    """Create all tables and indexes. Safe to run repeatedly.

    Args:
        cursor: Database cursor from get_cursor(conn)
    """
    cursor.execute('''
        CREATE TABLE IF NOT EXISTS users (
            id SERIAL PRIMARY KEY,
            username TEXT,
            firstname TEXT,
            lastname TEXT,
            email TEXT NOT NULL UNIQUE,
            password_hash TEXT NOT NULL,
            age INTEGER,
            gender TEXT,
            created_at TIMESTAMPTZ DEFAULT CURRENT_TIMESTAMP
        )
    ''')

    # No foreign keys: deleting a parent leaves its children in place
    cursor.execute('''
        CREATE TABLE IF NOT EXISTS boards (
            id SERIAL PRIMARY KEY,
            name TEXT NOT NULL,
            background TEXT,
            user_id INTEGER NOT NULL,
            sort_id INTEGER NOT NULL
        )
    ''')
    cursor.execute('CREATE INDEX IF NOT EXISTS idx_boards_user ON boards (user_id, sort_id, id)')

    cursor.execute('''
        CREATE TABLE IF NOT EXISTS categories (
            id SERIAL PRIMARY KEY,
            name TEXT NOT NULL,
            board_id INTEGER NOT NULL,
            sort_id INTEGER NOT NULL
        )
    ''')
    cursor.execute('CREATE INDEX IF NOT EXISTS idx_categories_board ON categories (board_id, sort_id, id)')

    cursor.execute('''
        CREATE TABLE IF NOT EXISTS tasks (
            id SERIAL PRIMARY KEY,
            name TEXT NOT NULL,
            description TEXT,
            category_id INTEGER NOT NULL,
            sort_id INTEGER NOT NULL
        )
    ''')
    cursor.execute('CREATE INDEX IF NOT EXISTS idx_tasks_category ON tasks (category_id, sort_id, id)')

    cursor.execute('''
        CREATE TABLE IF NOT EXISTS comments (
            id SERIAL PRIMARY KEY,
            task_id INTEGER NOT NULL,
            comment TEXT NOT NULL,
            user_info JSONB NOT NULL,
            date TIMESTAMPTZ NOT NULL
        )
    ''')
    cursor.execute('CREATE INDEX IF NOT EXISTS idx_comments_task ON comments (task_id, date, id)')

    cursor.execute('''
        CREATE TABLE IF NOT EXISTS record_sequences (
            name TEXT PRIMARY KEY,
            value INTEGER NOT NULL
        )
    ''')


def init_db():
    """Create the schema inside one transaction."""
    with transaction() as conn:
        create_schema(get_cursor(conn))
    logger.info('Database schema initialized')
