"""Alembic env: runs migrations over a sync driver even though the app uses async ones."""
from logging.config import fileConfig
import os

from alembic import context
from sqlalchemy import engine_from_config, pool

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

from app.db.base import Base  # noqa: E402
from app.db.session import to_sync_url  # noqa: E402
from app.core.config import get_settings  # noqa: E402

target_metadata = Base.metadata


def get_url() -> str:
    # ALEMBIC_DATABASE_URL, then DATABASE_URL from settings, then alembic.ini
    url = os.getenv("ALEMBIC_DATABASE_URL")
    if url:
        return url

    url = get_settings().database_url
    if url:
        return to_sync_url(url)

    return config.get_main_option("sqlalchemy.url")


def run_migrations_offline() -> None:
    context.configure(
        url=get_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        compare_type=True,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    configuration = config.get_section(config.config_ini_section) or {}
    configuration["sqlalchemy.url"] = get_url()

    connectable = engine_from_config(
        configuration,
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
        future=True,
    )

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
        )
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
