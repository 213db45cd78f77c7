"""
Database connection and session management.
Provides SQLAlchemy engine and session factories, the declarative base class,
the request-scoped session dependency and the transaction helper.
"""
import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Iterator

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from .exceptions import DatabaseException

# Set up logging
logger = logging.getLogger(__name__)

# Create base class for declarative models
Base = declarative_base()


def build_engine(database_url: str) -> Engine:
    """
    Create the SQLAlchemy engine for the configured database.

    SQLite URLs get a single shared connection so in-memory databases survive
    across sessions and threads.

    Args:
        database_url: SQLAlchemy connection string

    Returns:
        Engine: Database engine
    """
    if database_url.startswith("sqlite"):
        return create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_engine(database_url, pool_pre_ping=True)


def build_session_factory(engine: Engine) -> sessionmaker:
    """Create the session factory bound to an engine."""
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)


def get_db(request: Request) -> Iterator[Session]:
    """
    Database dependency - Creates and yields a database session.

    The session is automatically closed after the request is processed,
    even if an exception occurs during request handling.

    Yields:
        SQLAlchemy Session: Database session
    """
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def transaction(db: Session, operation: str = "write") -> Iterator[Session]:
    """
    Run a unit of work and commit it, rolling back on any error.

    IntegrityError and application exceptions propagate unchanged after the
    rollback so callers can translate them; any other SQLAlchemy failure is
    wrapped in a DatabaseException.

    Args:
        db: Database session
        operation: Short description used in error context

    Yields:
        Session: The same session
    """
    try:
        yield db
        db.commit()
    except IntegrityError:
        db.rollback()
        raise
    except SQLAlchemyError as e:
        db.rollback()
        raise DatabaseException(operation, e) from e
    except Exception:
        db.rollback()
        raise


def utcnow() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)
