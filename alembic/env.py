"""Alembic environment for the marketplace schema.

Migrations are hand-written SQL (op.execute); there is no autogenerate, so
no MetaData is attached. The URL always comes from config.settings so that
migrations and the app target the same database.
"""
import asyncio
import logging
from logging.config import fileConfig

from alembic import context
from sqlalchemy.engine import Connection, make_url
from sqlalchemy.ext.asyncio import create_async_engine

from config.settings import settings

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

logger = logging.getLogger("alembic.env")


def _configure(**kwargs: object) -> None:
    context.configure(target_metadata=None, transaction_per_migration=True, **kwargs)


def run_migrations_offline() -> None:
    """Emit SQL to stdout instead of touching a database."""
    _configure(
        url=settings.DATABASE_URL,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def _run_sync(connection: Connection) -> None:
    _configure(connection=connection)
    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online() -> None:
    url = make_url(settings.DATABASE_URL)
    logger.info("Migrating %s", url.render_as_string(hide_password=True))
    engine = create_async_engine(url)
    try:
        async with engine.connect() as connection:
            await connection.run_sync(_run_sync)
    finally:
        await engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online())
