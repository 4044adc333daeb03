"""Alembic environment for the doctor administration schema.

The database URL is resolved in this order:
    1. ``alembic -x db_url=postgresql://... upgrade head``
    2. ``ALEMBIC_DATABASE_URL`` or ``DATABASE_URL`` in the environment
    3. ``Settings.DATABASE_URL`` from the application config

Async driver suffixes are stripped so migrations run on a synchronous
engine. ``alembic upgrade head --sql`` renders the SQL offline.
"""

from logging.config import fileConfig
import os
import sys

from alembic import context
from sqlalchemy import pool, engine_from_config

PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

config = context.config


def _to_sync_url(url: str) -> str:
    """Swap async drivers for their synchronous counterparts."""
    return url.replace("+asyncpg", "+psycopg2").replace("+aiosqlite", "")


def _resolve_database_url() -> str:
    cli_url = context.get_x_argument(as_dictionary=True).get("db_url")
    if cli_url:
        return _to_sync_url(cli_url)

    env_url = os.environ.get("ALEMBIC_DATABASE_URL") or os.environ.get("DATABASE_URL")
    if env_url:
        return _to_sync_url(env_url)

    try:
        from src.careadmin.core.config import get_settings

        return _to_sync_url(get_settings().DATABASE_URL)
    except Exception as exc:
        raise RuntimeError(
            "Cannot resolve database URL. Provide one of:\n"
            "  1. alembic -x db_url=postgresql://... upgrade head\n"
            "  2. ALEMBIC_DATABASE_URL=postgresql://... alembic upgrade head\n"
            "  3. DATABASE_URL in the environment or .env file\n"
            f"Original error: {exc}"
        ) from exc


config.set_main_option("sqlalchemy.url", _resolve_database_url())

from src.careadmin.db.session import Base  # noqa: E402

# Import all model modules so their tables appear in Base.metadata
from src.careadmin.models import (  # noqa: E402, F401
    AdminActivity,
    BlacklistEntry,
    Candidate,
    Doctor,
    Notification,
    SuspensionRecord,
    User,
)

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def run_migrations_offline() -> None:
    """Emit the migration SQL without connecting."""
    context.configure(
        url=config.get_main_option("sqlalchemy.url"),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Run migrations against a live connection."""
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
            # SQLite cannot ALTER most constraints in place.
            render_as_batch=connection.dialect.name == "sqlite",
        )

        with context.begin_transaction():
            context.run_migrations()

    connectable.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
