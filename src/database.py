"""Database engine and per-request sessions for the credential and session store."""

from collections.abc import Generator
from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from src.config import Settings, get_settings

settings = get_settings()


def build_engine_options(settings: Settings) -> dict[str, Any]:
    """Engine keyword arguments for the configured database.

    SQLite gets no pool sizing; its default pools do not accept it.
    """
    options: dict[str, Any] = {"pool_pre_ping": True, "echo": settings.db_echo}
    if settings.database_url.startswith("sqlite"):
        options["connect_args"] = {"check_same_thread": False}
    else:
        options["pool_size"] = settings.db_pool_size
        options["max_overflow"] = settings.db_max_overflow
    return options


engine = create_engine(settings.database_url, **build_engine_options(settings))

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base: Any = declarative_base()


def get_db() -> Generator[Session, None, None]:
    """Dependency that provides a database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
