"""
SQLAlchemy engine and session management.

The engine is created lazily from settings and shared across requests;
every request gets its own Session through the get_db dependency.
"""

import logging
from collections.abc import Iterator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from fashion_api.config import get_settings


logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Base class for all database models."""


_engine: Engine | None = None
_session_factory: sessionmaker[Session] | None = None


def get_engine() -> Engine:
    """Get the shared engine (lazy initialization)."""
    global _engine, _session_factory
    if _engine is None:
        settings = get_settings()
        connect_args = {}
        if settings.database_url.startswith('sqlite'):
            connect_args['check_same_thread'] = False
        _engine = create_engine(
            settings.database_url,
            echo=settings.database_echo,
            pool_pre_ping=True,
            connect_args=connect_args,
        )
        _session_factory = sessionmaker(bind=_engine, expire_on_commit=False)
        logger.info(f'Database engine ready ({_engine.url.render_as_string(hide_password=True)})')
    return _engine


def get_session_factory() -> sessionmaker[Session]:
    get_engine()
    return _session_factory


def init_db(engine: Engine | None = None) -> None:
    """Create all tables that do not exist yet."""
    # Import models so they register on Base.metadata
    from fashion_api.db import models  # noqa: F401

    Base.metadata.create_all(bind=engine or get_engine())


def dispose_engine() -> None:
    """Close all pooled connections."""
    global _engine, _session_factory
    if _engine is not None:
        _engine.dispose()
        _engine = None
        _session_factory = None
        logger.info('Database engine disposed')


def get_db() -> Iterator[Session]:
    """
    FastAPI dependency yielding a request-scoped session.

    Services commit their own writes; anything left pending when the
    endpoint raised is rolled back.
    """
    session = get_session_factory()()
    try:
        yield session
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
