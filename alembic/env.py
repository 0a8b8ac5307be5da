"""
Alembic environment for the carpool schema.

The database URL comes from carpool.config.Settings (environment or .env),
never from alembic.ini. Importing carpool.models puts users, trips, bookings,
reviews and audit_logs on Base.metadata for autogenerate.
"""

import os
import sys
from logging.config import fileConfig

from sqlalchemy import create_engine, pool
from alembic import context

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from carpool.config import Settings
from carpool.database import Base

import carpool.models  # noqa: F401

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

settings = Settings()
target_metadata = Base.metadata


def _options(**extra) -> dict:
    # SQLite cannot ALTER constraints in place; batch mode rebuilds the table
    return dict(
        target_metadata=target_metadata,
        compare_type=True,
        compare_server_default=True,
        render_as_batch=settings.is_sqlite,
        **extra,
    )


def run_migrations_offline() -> None:
    """Emit SQL for review instead of touching the database."""
    context.configure(
        **_options(url=settings.DATABASE_URL, literal_binds=True, dialect_opts={"paramstyle": "named"})
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    engine = create_engine(settings.DATABASE_URL, poolclass=pool.NullPool)
    with engine.connect() as connection:
        context.configure(**_options(connection=connection))
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
