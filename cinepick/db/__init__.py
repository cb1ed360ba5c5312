"""Database module."""

from cinepick.db.database import async_session_maker, engine, get_session, init_db

__all__ = ["async_session_maker", "engine", "get_session", "init_db"]
