"""
db/connection.py
----------------
Manages the PostgreSQL connection pool.
Uses psycopg2's ThreadedConnectionPool so request threads can share it,
and exposes `transaction()` for all-or-nothing units of work.
"""

from contextlib import contextmanager
from typing import Iterator, Optional

import psycopg2
from psycopg2 import pool
from config import DATABASE_URL, DB_POOL_MIN, DB_POOL_MAX
from db.context import QueryContext
from utils.logger import get_logger

logger = get_logger(__name__)

_pool: pool.ThreadedConnectionPool | None = None


def init_pool(min_conn: int = DB_POOL_MIN, max_conn: int = DB_POOL_MAX) -> None:
    """
    Initialize the database connection pool.

    Args:
        min_conn: Minimum number of connections to keep open.
        max_conn: Maximum number of connections allowed.

    Raises:
        psycopg2.OperationalError: If the database is unreachable.
    """
    global _pool
    if _pool is not None:
        return
    try:
        _pool = pool.ThreadedConnectionPool(min_conn, max_conn, DATABASE_URL)
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


class _ContextCursor:
    """
    Cursor wrapper that keeps every statement inside the context's deadline.

    PostgreSQL applies ``statement_timeout`` per statement, so the remaining
    time is re-applied before each one, and a cancelled or expired context
    stops the unit of work before the next statement runs.
    """

    def __init__(self, cur, ctx: QueryContext):
        self._cur = cur
        self._ctx = ctx

    def execute(self, sql, params=None):
        self._ctx.raise_if_done()
        timeout_ms = self._ctx.remaining_ms()
        if timeout_ms is not None:
            # 0 would mean "no limit" to PostgreSQL
            self._cur.execute(f"SET LOCAL statement_timeout = {max(1, timeout_ms)};")
        return self._cur.execute(sql, params)

    def __getattr__(self, name):
        return getattr(self._cur, name)


@contextmanager
def transaction(ctx: Optional[QueryContext] = None) -> Iterator:
    """
    Run a unit of work on one pooled connection.

    Yields a cursor. The transaction is committed when the block exits
    normally and rolled back on any exception; the connection always goes
    back to the pool. When a context is given, every statement runs with the
    context's remaining time as ``statement_timeout``, ``ctx.cancel()``
    interrupts the running statement, and a context that is cancelled or
    expired at any point before commit rolls the whole transaction back.

    Raises:
        ContextExpiredError: If ``ctx`` is cancelled or expires before commit.
    """
    if ctx is not None:
        ctx.raise_if_done()

    conn = get_connection()
    if ctx is not None:
        ctx.bind(conn)
    try:
        with conn.cursor() as cur:
            if ctx is None:
                yield cur
            else:
                # a cancel may have landed before the connection was bound
                ctx.raise_if_done()
                yield _ContextCursor(cur, ctx)
        if ctx is not None:
            ctx.raise_if_done()
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        if ctx is not None:
            ctx.unbind()
        release_connection(conn)
