"""FastAPI dependencies for dependency injection.

Provides reusable dependencies for routes including:
- Settings and strategy components stored on the application
- The key-value store
- Owner identification (session id or API key)
- Loading the owner's schema and history
"""

import logging

from fastapi import Depends, Header, HTTPException, Request, status
from pydantic import ValidationError

from adtax.core.api_keys import validate_api_key
from adtax.core.config import Settings
from adtax.core.factory import ComponentFactory
from adtax.core.storage_keys import api_key_owner, config_key, names_key
from adtax.interfaces.store import BaseKeyValueStore, StoreError
from adtax.strategies.naming_engine import GeneratedRecord, Schema, migrate_history

logger = logging.getLogger(__name__)


def get_app_settings(request: Request) -> Settings:
    """Settings the application was created with."""
    return request.app.state.settings


def get_factory(request: Request) -> ComponentFactory:
    """Component factory the application was created with."""
    return request.app.state.factory


def get_store(factory: ComponentFactory = Depends(get_factory)) -> BaseKeyValueStore:
    """Dependency for the configured key-value store."""
    return factory.get_store()


async def get_owner_id(
    x_session_id: str | None = Header(default=None, alias="X-Session-ID"),
    x_api_key: str | None = Header(default=None, alias="X-API-Key"),
    store: BaseKeyValueStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
) -> str:
    """Dependency resolving who owns the schema and history being accessed.

    An API key, when sent, takes precedence over the session id.

    Args:
        x_session_id: Browser session id from the X-Session-ID header.
        x_api_key: API key from the X-API-Key header.
        store: Key-value store.
        settings: Application settings.

    Returns:
        The owner id used to namespace stored keys.

    Raises:
        HTTPException: If the API key is invalid or no identity is provided.
    """
    try:
        if x_api_key:
            key_data = await validate_api_key(store, x_api_key, settings.api_key_ttl_seconds)
            if key_data is None:
                logger.warning("Rejected invalid API key")
                raise HTTPException(
                    status_code=status.HTTP_401_UNAUTHORIZED,
                    detail="Invalid API key",
                )
            return api_key_owner(key_data.key_id)

        if not x_session_id or not x_session_id.strip():
            logger.warning("X-Session-ID header is missing")
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Session ID required",
            )

        return x_session_id.strip()

    except HTTPException:
        raise
    except StoreError as e:
        logger.error(f"Store error resolving owner: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Storage unavailable",
        ) from e


async def load_schema(store: BaseKeyValueStore, owner: str) -> Schema | None:
    """Load and validate the owner's schema.

    Raises:
        HTTPException: If the stored schema no longer validates.
    """
    raw = await store.get(config_key(owner))
    if raw is None:
        return None

    try:
        return Schema.model_validate(raw)
    except ValidationError as e:
        logger.error(f"Stored configuration for {owner} is invalid: {e.errors()}")
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Stored configuration is invalid",
        ) from e


async def require_schema(
    owner: str = Depends(get_owner_id),
    store: BaseKeyValueStore = Depends(get_store),
) -> Schema:
    """Dependency for routes that need an existing schema.

    Raises:
        HTTPException: If the owner has no schema.
    """
    schema = await load_schema(store, owner)
    if schema is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Configuration not found",
        )
    return schema


async def load_history(
    store: BaseKeyValueStore,
    owner: str,
    schema: Schema | None,
) -> list[GeneratedRecord]:
    """Load the owner's history, newest first.

    Entries of any stored vintage are accepted; bare file names are
    parsed against *schema* when one is available. Migrated history is
    written back once so later reads see the same timestamps.
    """
    raw = await store.get(names_key(owner))
    if not isinstance(raw, list):
        return []

    records = migrate_history(raw, schema or Schema())
    if [record.model_dump(mode="json", by_alias=True) for record in records] != raw:
        logger.info(f"Persisting migrated history for {owner} ({len(records)} record(s))")
        await save_history(store, owner, records)
    return records


async def save_history(
    store: BaseKeyValueStore,
    owner: str,
    records: list[GeneratedRecord],
) -> None:
    """Replace the owner's stored history with *records*."""
    await store.set(
        names_key(owner),
        [record.model_dump(mode="json", by_alias=True) for record in records],
    )
