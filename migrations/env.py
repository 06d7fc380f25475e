"""Alembic environment for the webhook_logs schema.

The URL always comes from DATABASE_URL (the same value the service reads),
normalized by env_helpers. The project root is importable through
``prepend_sys_path`` in alembic.ini.
"""

from __future__ import annotations

from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool

from migrations.env_helpers import _get_database_url

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# Revisions are plain SQL; there is no metadata to autogenerate from.
target_metadata = None

# Each revision commits on its own so a failed upgrade keeps earlier ones.
_CONFIGURE_OPTS = {
    "target_metadata": target_metadata,
    "transaction_per_migration": True,
}


def run_migrations_offline() -> None:
    """Emit the SQL script for ``alembic upgrade --sql``."""
    context.configure(
        url=_get_database_url(),
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **_CONFIGURE_OPTS,
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Apply migrations against DATABASE_URL."""
    section = dict(config.get_section(config.config_ini_section) or {})
    section["sqlalchemy.url"] = _get_database_url()

    engine = engine_from_config(section, prefix="sqlalchemy.", poolclass=pool.NullPool)
    try:
        with engine.connect() as connection:
            context.configure(connection=connection, **_CONFIGURE_OPTS)
            with context.begin_transaction():
                context.run_migrations()
    finally:
        engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
