"""Alembic environment for the quiz SQLite database.

``init_db()`` sets ``sqlalchemy.url`` itself; when the alembic CLI runs
without one, the database at DATABASE_PATH (read from .env) is used.
Only online upgrades are supported.
"""

import os
from logging.config import fileConfig
from pathlib import Path

from alembic import context
from dotenv import load_dotenv
from sqlalchemy import create_engine, pool

load_dotenv(Path(__file__).resolve().parents[1] / ".env")

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name, disable_existing_loggers=False)


def _database_url() -> str:
    url = config.get_main_option("sqlalchemy.url")
    if url:
        return url
    return f"sqlite:///{os.getenv('DATABASE_PATH', 'math_quiz.db')}"


def run_migrations() -> None:
    engine = create_engine(_database_url(), poolclass=pool.NullPool)
    with engine.connect() as connection:
        # SQLite cannot ALTER most columns in place
        context.configure(connection=connection, render_as_batch=True)
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    raise SystemExit("Offline (--sql) migrations are not supported for the SQLite quiz database")

run_migrations()
