"""
sqlite3 connection and schema for the cache database.
"""

from sqlite3 import Connection, connect
from os.path import exists


def connection_from_path(path: str) -> Connection:
    """
    Creates a connection to a database at ``path``.
    If the file at ``path`` doesn't exist, creates a new one and
    initializes a database schema.

    Args:
        path: The absolute path to the database (``:memory:`` is accepted)

    Returns:
        An instance of sqlite3 Connection

    Note:
        The schema migrations are currently not supported.
    """

    is_fresh = path == ":memory:" or not exists(path)
    conn = connect(path)
    if is_fresh:
        init_db(conn)

    return conn


def init_db(conn: Connection):
    """
    Initialize db schema

    Args:
        conn: Connection to the database
    """
    cursor = conn.cursor()
    # Hash-field cache with per key expiration (unix seconds, NULL = no TTL)
    cursor.execute(
        """CREATE TABLE IF NOT EXISTS kv
            (key text, field text, value text, expires_at real)"""
    )
    cursor.execute(
        """CREATE UNIQUE INDEX IF NOT EXISTS idx_kv_id
            ON kv(key,field)"""
    )
    conn.commit()
