"""Database access layer using psycopg2.

Provides:
- get_conn(): Open a connection for a DSN
- txn(): Context manager for short, safe transactions
- fetchone(): Query helper
"""

from contextlib import contextmanager
from typing import Any, Iterator, Sequence

import psycopg2
from psycopg2.extensions import connection as PgConnection, cursor as PgCursor


def get_conn(dsn: str) -> PgConnection:
    """Open a new database connection.

    Args:
        dsn: libpq DSN or postgres:// URL (the service's DATABASE_URL).

    Returns:
        psycopg2 connection object.

    Raises:
        RuntimeError: If dsn is empty.
        psycopg2.Error: On connection failure.
    """
    if not dsn:
        raise RuntimeError("DATABASE_URL not configured")
    return psycopg2.connect(dsn)


@contextmanager
def txn(dsn: str) -> Iterator[PgCursor]:
    """Context manager for a short, safe transaction on a fresh connection.

    Commits on successful exit, rolls back on exception, always closes the
    connection.

    Example:
        with txn(settings.database_url) as cur:
            cur.execute("INSERT INTO t (x) VALUES (%s)", (1,))
    """
    conn = get_conn(dsn)
    try:
        with conn.cursor() as cur:
            yield cur
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(
    cur: PgCursor,
    query: str,
    params: Sequence[Any] | None = None,
) -> tuple[Any, ...] | None:
    """Execute query and fetch one row."""
    cur.execute(query, params)
    return cur.fetchone()
