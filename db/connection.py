"""
db/connection.py
----------------
Manages the PostgreSQL connection pool.
Uses psycopg2's ThreadedConnectionPool so repositories can be called
from several threads at once, each call borrowing its own connection.

Every connection and cursor handed out here is scoped: `connection()`
and `cursor()` release what they acquired on every exit path. Errors
raised while releasing are logged and suppressed so they never hide the
outcome of the work done inside the scope.
"""

from contextlib import contextmanager
from typing import Callable, Iterator

import psycopg2
from psycopg2 import pool, extras

from config import DATABASE_URL, DB_POOL_MAX, DB_POOL_MIN
from utils.logger import get_logger

logger = get_logger(__name__)

_pool: pool.ThreadedConnectionPool | None = None


def init_pool(
    min_conn: int = DB_POOL_MIN, max_conn: int = DB_POOL_MAX, dsn: str = DATABASE_URL
) -> None:
    """
    Initialize the database connection pool.

    Args:
        min_conn: Minimum number of connections to keep open.
        max_conn: Maximum number of connections allowed.
        dsn: libpq connection string or URL.

    Raises:
        psycopg2.OperationalError: If the database is unreachable.
    """
    global _pool
    if _pool is not None:
        return
    try:
        _pool = pool.ThreadedConnectionPool(min_conn, max_conn, dsn)
        logger.info("Database connection pool initialized successfully.")
    except psycopg2.OperationalError as e:
        logger.error(f"Failed to initialize database pool: {e}")
        raise


def get_connection():
    """
    Get a connection from the pool.

    Returns:
        A psycopg2 connection object.

    Raises:
        RuntimeError: If the pool has not been initialized.
        psycopg2.pool.PoolError: If the pool is exhausted.
    """
    if _pool is None:
        raise RuntimeError("Database pool not initialized. Call init_pool() first.")
    return _pool.getconn()


def release_connection(conn) -> None:
    """
    Return a connection back to the pool.

    Args:
        conn: The psycopg2 connection to release.
    """
    if _pool is not None:
        _pool.putconn(conn)


def close_pool() -> None:
    """Close all connections in the pool."""
    global _pool
    if _pool is not None:
        _pool.closeall()
        _pool = None
        logger.info("Database connection pool closed.")


def close_quietly(action: Callable[[], object], what: str) -> None:
    """
    Run a release action, logging instead of raising if it fails.

    Args:
        action: Zero-argument callable that releases something.
        what: Short label for the log line (e.g. "cursor").
    """
    try:
        action()
    except psycopg2.Error as e:
        logger.warning(f"Ignoring error while releasing {what}: {e}")


@contextmanager
def connection() -> Iterator:
    """
    Borrow a pooled connection for the duration of a `with` block.

    An exception escaping the block rolls back the open transaction
    before it propagates. The connection always goes back to the pool.
    """
    conn = get_connection()
    try:
        yield conn
    except Exception:
        close_quietly(conn.rollback, "transaction (rollback)")
        raise
    finally:
        close_quietly(lambda: release_connection(conn), "connection")


@contextmanager
def cursor(conn, cursor_factory=extras.RealDictCursor) -> Iterator:
    """
    Open a cursor on `conn` and close it when the block exits.

    Rows come back as dicts keyed by column name by default; pass
    ``cursor_factory=None`` for plain tuples.
    """
    cur = conn.cursor(cursor_factory=cursor_factory)
    try:
        yield cur
    finally:
        close_quietly(cur.close, "cursor")
