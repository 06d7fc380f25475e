"""Database URL helpers for Alembic migrations.

Kept apart from env.py so they can be tested without triggering
alembic.context at import time.
"""

from __future__ import annotations

import os
from urllib.parse import quote_plus

from psycopg2.extensions import parse_dsn

_DRIVER_PREFIX = "postgresql+psycopg2://"


def _libpq_dsn_to_url(dsn: str) -> str:
    """Convert a libpq ``key=value`` DSN to a SQLAlchemy URL."""
    tokens = parse_dsn(dsn)

    user = quote_plus(tokens.get("user", ""))
    password = quote_plus(tokens.get("password", ""))
    dbname = quote_plus(tokens.get("dbname", ""))
    host = tokens.get("host", "localhost")
    port = tokens.get("port", "5432")

    credentials = f"{user}:{password}@" if password else (f"{user}@" if user else "")

    if host.startswith("/"):
        # Unix socket
        return f"{_DRIVER_PREFIX}{credentials}/{dbname}?host={quote_plus(host)}"

    return f"{_DRIVER_PREFIX}{credentials}{host}:{port}/{dbname}"


def _get_database_url() -> str:
    """SQLAlchemy URL for DATABASE_URL (same value the service uses)."""
    url = os.environ.get("DATABASE_URL", "").strip()
    if not url:
        raise RuntimeError("DATABASE_URL is required to run migrations")
    if "://" not in url:
        return _libpq_dsn_to_url(url)
    for scheme in ("postgres://", "postgresql://"):
        if url.startswith(scheme):
            return _DRIVER_PREFIX + url[len(scheme):]
    return url
