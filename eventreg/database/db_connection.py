"""
PostgreSQL connection helpers.
Provides init_pool() for the app factory and get_db() for the data access layer.
"""

import atexit
import logging
from contextlib import contextmanager
from typing import Iterator

from flask import Flask, current_app
from psycopg2.extras import RealDictCursor
from psycopg2.pool import ThreadedConnectionPool

POOL_KEY = "db_pool"


def init_pool(app: Flask) -> None:
    """
    Create the process-wide connection pool and attach it to the app.

    The pool lives in app.extensions so handlers never import it as a global.
    Skipped when no DATABASE_URL is configured (tests patch get_db instead).

    Args:
        app (Flask): The application being built by create_app().
    """
    dsn = app.config.get("DATABASE_URL")
    if not dsn:
        logging.warning("DATABASE_URL not configured, connection pool disabled")
        return

    pool = ThreadedConnectionPool(
        app.config.get("DB_POOL_MIN", 1),
        app.config.get("DB_POOL_MAX", 10),
        dsn,
        cursor_factory=RealDictCursor,
    )
    app.extensions[POOL_KEY] = pool
    atexit.register(pool.closeall)
    logging.info("Database pool ready")


@contextmanager
def get_db() -> Iterator:
    """
    Borrow a pooled connection for exactly one transaction.

    Commits when the block exits normally, rolls back when it raises,
    and always returns the connection to the pool.

    Usage:
        with get_db() as conn:
            with conn.cursor() as cur:
                cur.execute(...)

    Raises:
        RuntimeError: If the app was created without a pool.
        psycopg2.Error: If the pool is exhausted or the query fails.
    """
    pool = current_app.extensions.get(POOL_KEY)
    if pool is None:
        raise RuntimeError("Database pool is not initialised. Is DATABASE_URL set?")

    conn = pool.getconn()
    try:
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        pool.putconn(conn)
