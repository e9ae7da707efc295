"""Alembic environment wired to the application metadata."""

from logging.config import fileConfig
import os

from alembic import context
from sqlalchemy import engine_from_config
from sqlalchemy import pool

from app.db import models  # noqa: F401
from app.db.base import Base

config = context.config


def _resolve_sqlalchemy_url() -> str:
    explicit_url = config.attributes.get("connection_url")
    if explicit_url:
        return str(explicit_url)

    database_url = os.getenv("APP_DATABASE_URL", "").strip()
    if database_url:
        return database_url

    configured = config.get_main_option("sqlalchemy.url")
    if configured:
        return configured

    raise RuntimeError("APP_DATABASE_URL is required to run migrations")


config.set_main_option("sqlalchemy.url", _resolve_sqlalchemy_url())

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def run_migrations_offline() -> None:
    url = config.get_main_option("sqlalchemy.url")
    context.configure(url=url, target_metadata=target_metadata, literal_binds=True, compare_type=True)
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    with connectable.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata, compare_type=True)
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
