"""Directory Store engine and session management."""

from collections.abc import Generator
from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import Session, sessionmaker

from config.settings import settings


def engine_options(database_url: str) -> dict[str, Any]:
    """Return create_engine keyword arguments suited to the database backend.

    SQLite (local development) does not take connection pool sizing, and its
    connections must be shareable with the threadpool FastAPI runs sync code on.
    """
    if make_url(database_url).get_backend_name() == "sqlite":
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_pre_ping": True,
        "pool_size": 10,
        "max_overflow": 20,
    }


engine = create_engine(
    settings.database_url,
    echo=False,
    **engine_options(settings.database_url),
)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)


def get_db() -> Generator[Session, Any, None]:
    """Dependency that provides a Directory Store session.

    Yields a SQLAlchemy session and ensures proper cleanup after use.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
