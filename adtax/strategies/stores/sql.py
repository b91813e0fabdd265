"""SQL-backed key-value store.

Persists values in the ``kv_entries`` table through an async
SQLAlchemy session maker. Works against PostgreSQL (asyncpg) and
SQLite (aiosqlite).
"""

import logging
import time
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from adtax.core.config import Settings
from adtax.db.models import KeyValueEntry
from adtax.db.session import close_db, create_all_tables
from adtax.interfaces.store import BaseKeyValueStore, StoreError

logger = logging.getLogger(__name__)


class SQLKeyValueStore(BaseKeyValueStore):
    """Key-value store over a single SQLModel table.

    Attributes:
        session_maker: Factory for async database sessions.
        settings: Settings used to create tables on initialization.
    """

    def __init__(
        self,
        session_maker: async_sessionmaker[AsyncSession],
        settings: Settings | None = None,
    ) -> None:
        """Initialize the store.

        Args:
            session_maker: Async session maker bound to the target database.
            settings: Optional settings. If None, uses global settings.
        """
        self._session_maker = session_maker
        self._settings = settings

    async def initialize(self) -> None:
        try:
            await create_all_tables(self._settings)
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to create key-value table: {e}") from e

    async def get(self, key: str) -> Any | None:
        try:
            async with self._session_maker() as session:
                entry = await session.get(KeyValueEntry, key)
                if entry is None:
                    return None

                if entry.is_expired(time.time()):
                    logger.debug(f"Key expired, removing: {key}")
                    await session.delete(entry)
                    await session.commit()
                    return None

                return entry.value

        except SQLAlchemyError as e:
            logger.error(f"Database error reading key {key}: {e}", exc_info=True)
            raise StoreError(f"Failed to read '{key}'") from e

    async def set(self, key: str, value: Any, ttl_seconds: int | None = None) -> None:
        expires_at = time.time() + ttl_seconds if ttl_seconds else None

        try:
            async with self._session_maker() as session:
                try:
                    entry = await session.get(KeyValueEntry, key)
                    if entry is None:
                        session.add(KeyValueEntry(key=key, value=value, expires_at=expires_at))
                    else:
                        entry.value = value
                        entry.expires_at = expires_at
                        session.add(entry)
                    await session.commit()
                except SQLAlchemyError:
                    await session.rollback()
                    raise

        except SQLAlchemyError as e:
            logger.error(f"Database error writing key {key}: {e}", exc_info=True)
            raise StoreError(f"Failed to write '{key}'") from e

    async def delete(self, key: str) -> None:
        try:
            async with self._session_maker() as session:
                entry = await session.get(KeyValueEntry, key)
                if entry is not None:
                    await session.delete(entry)
                    await session.commit()

        except SQLAlchemyError as e:
            logger.error(f"Database error deleting key {key}: {e}", exc_info=True)
            raise StoreError(f"Failed to delete '{key}'") from e

    async def close(self) -> None:
        await close_db()
