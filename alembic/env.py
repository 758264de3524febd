"""Alembic environment, wired to the application's settings and metadata."""

from sqlalchemy import create_engine

from alembic import context
from src.config import get_settings
from src.database import Base
from src import models  # noqa: F401

settings = get_settings()


def run_migrations_online() -> None:
    """Run migrations against a live database connection."""
    connectable = create_engine(settings.database_url)
    with connectable.connect() as connection:
        context.configure(connection=connection, target_metadata=Base.metadata)
        with context.begin_transaction():
            context.run_migrations()


def run_migrations_offline() -> None:
    """Emit SQL without connecting."""
    context.configure(
        url=settings.database_url,
        target_metadata=Base.metadata,
        literal_binds=True,
    )
    with context.begin_transaction():
        context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
