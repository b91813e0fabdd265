"""API key management routes.

Issues, lists and revokes API keys, and copies a session's schema to a
key so that API clients share it.
"""

import logging

from fastapi import APIRouter, Depends, Header, HTTPException, status

from adtax.api.deps import get_app_settings, get_store
from adtax.api.schemas import (
    ApiKeyCreate,
    ApiKeyCreatedResponse,
    ApiKeyListResponse,
    ApiKeyResponse,
    SuccessResponse,
)
from adtax.core.api_keys import get_api_key, issue_api_key, list_api_keys, revoke_api_key
from adtax.core.config import Settings
from adtax.core.storage_keys import api_key_owner, config_key
from adtax.interfaces.store import BaseKeyValueStore, StoreError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/keys", tags=["keys"])


@router.post("", response_model=ApiKeyCreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_key(
    key_data: ApiKeyCreate,
    store: BaseKeyValueStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
) -> ApiKeyCreatedResponse:
    """Issue a new API key.

    The plain key is returned only in this response.
    """
    try:
        api_key, created = await issue_api_key(
            store,
            name=key_data.name,
            environment=key_data.environment,
            ttl_seconds=settings.api_key_ttl_seconds,
        )
        return ApiKeyCreatedResponse(
            api_key=api_key,
            key_id=created.key_id,
            name=created.name,
            environment=created.environment,
            created_at=created.created_at,
        )

    except HTTPException:
        raise
    except StoreError:
        raise
    except Exception as e:
        logger.error(f"Unexpected error in create_key: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred",
        ) from e


@router.get("", response_model=ApiKeyListResponse)
async def list_keys(
    store: BaseKeyValueStore = Depends(get_store),
) -> ApiKeyListResponse:
    """List issued API keys without their secrets."""
    try:
        keys = await list_api_keys(store)
        return ApiKeyListResponse(
            keys=[ApiKeyResponse.model_validate(key.model_dump()) for key in keys]
        )

    except HTTPException:
        raise
    except StoreError:
        raise
    except Exception as e:
        logger.error(f"Unexpected error in list_keys: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred",
        ) from e


@router.delete("/{key_id}", response_model=SuccessResponse)
async def delete_key(
    key_id: str,
    store: BaseKeyValueStore = Depends(get_store),
) -> SuccessResponse:
    """Revoke an API key."""
    try:
        if not await revoke_api_key(store, key_id):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="API key not found",
            )
        return SuccessResponse(message="API key revoked")

    except HTTPException:
        raise
    except StoreError:
        raise
    except Exception as e:
        logger.error(f"Unexpected error in delete_key: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred",
        ) from e


@router.post("/{key_id}/sync-config", response_model=SuccessResponse)
async def sync_key_config(
    key_id: str,
    x_session_id: str | None = Header(default=None, alias="X-Session-ID"),
    store: BaseKeyValueStore = Depends(get_store),
) -> SuccessResponse:
    """Copy the session's schema to the API key.

    Raises:
        HTTPException: If the session id is missing, or the key or the
            session's schema does not exist.
    """
    try:
        if not x_session_id or not x_session_id.strip():
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Session ID required",
            )

        if await get_api_key(store, key_id) is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="API key not found",
            )

        config = await store.get(config_key(x_session_id.strip()))
        if config is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="No configuration found for session",
            )

        await store.set(config_key(api_key_owner(key_id)), config)
        logger.info(f"Synced session config to API key {key_id}")
        return SuccessResponse(message="Configuration synced to API key")

    except HTTPException:
        raise
    except StoreError:
        raise
    except Exception as e:
        logger.error(f"Unexpected error in sync_key_config: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred",
        ) from e
