"""Alembic env: migrations run over the app's own async engine (aiosqlite / asyncpg)."""
import asyncio
from logging.config import fileConfig
import os

from alembic import context
from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import create_async_engine

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

from app.db.base import Base  # noqa: E402
from app.db.session import _to_async_url  # noqa: E402
from app.core.config import get_settings  # noqa: E402

target_metadata = Base.metadata


def get_url() -> str:
    # ALEMBIC_DATABASE_URL, then the app's DATABASE_URL, then alembic.ini
    url = os.getenv("ALEMBIC_DATABASE_URL") or get_settings().database_url
    if not url:
        url = config.get_main_option("sqlalchemy.url")
    return _to_async_url(url)


def _configure(**kwargs) -> None:
    context.configure(
        target_metadata=target_metadata,
        compare_type=True,
        render_as_batch=True,  # SQLite cannot ALTER most constraints in place
        **kwargs,
    )


def run_migrations_offline() -> None:
    _configure(url=get_url(), literal_binds=True, dialect_opts={"paramstyle": "named"})
    with context.begin_transaction():
        context.run_migrations()


def _run_on_connection(connection: Connection) -> None:
    _configure(connection=connection)
    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online() -> None:
    engine = create_async_engine(get_url(), poolclass=pool.NullPool)
    async with engine.connect() as conn:
        await conn.run_sync(_run_on_connection)
    await engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online())
