"""
Persistence layer: engine/session management and ORM models.
"""

from fashion_api.db.base import Base, dispose_engine, get_db, get_engine, get_session_factory, init_db


__all__ = [
    'Base',
    'dispose_engine',
    'get_db',
    'get_engine',
    'get_session_factory',
    'init_db',
]
