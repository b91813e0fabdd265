"""Database models and session management."""

from adtax.db.models import KeyValueEntry
from adtax.db.session import (
    AsyncSession,
    close_db,
    create_all_tables,
    drop_all_tables,
    get_engine,
    get_session_maker,
)

__all__ = [
    # Models
    "KeyValueEntry",
    # Session
    "AsyncSession",
    "close_db",
    "create_all_tables",
    "drop_all_tables",
    "get_engine",
    "get_session_maker",
]
