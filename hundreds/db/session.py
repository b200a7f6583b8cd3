from __future__ import annotations

from collections.abc import Generator
from contextlib import contextmanager

from loguru import logger
from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

from hundreds.db.models import Base


def build_engine(database_url: str) -> Engine:
    """Create an engine with the connection args the URL's backend needs."""
    connect_args = {}
    if "sqlite" in database_url.lower():
        connect_args = {"check_same_thread": False}

    logger.info(f"Initializing database engine: {database_url}")
    return create_engine(
        database_url,
        connect_args=connect_args,
        echo=False,  # Set to True for SQL query logging
        pool_pre_ping=True,
    )


def build_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def create_schema(engine: Engine) -> None:
    """Ensure all tables exist."""
    logger.info("Ensuring database tables exist")
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables verified")


@contextmanager
def session_scope(factory: sessionmaker[Session]) -> Generator[Session, None, None]:
    """Open a session from factory, commit on success, roll back on error."""
    session = factory()
    try:
        yield session
        session.commit()
        logger.debug("Database session committed")
    except Exception as e:
        logger.error(f"Database session error, rolling back: {e}")
        session.rollback()
        raise
    finally:
        session.close()
