"""Configuration API routes.

Stores, locks and seeds the variable schema of the requesting owner.
"""

import hmac
import logging

from fastapi import APIRouter, Depends, Header, HTTPException, status

from adtax.api.deps import get_app_settings, get_owner_id, get_store, load_schema
from adtax.api.schemas import ConfigResponse, SeedResponse, SuccessResponse, UnlockRequest
from adtax.core.config import Settings
from adtax.core.storage_keys import config_key
from adtax.db.seed import seed_example_config
from adtax.interfaces.store import BaseKeyValueStore, StoreError
from adtax.strategies.naming_engine import Schema

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/config", tags=["config"])


async def _store_schema(store: BaseKeyValueStore, owner: str, schema: Schema) -> None:
    await store.set(config_key(owner), schema.model_dump(mode="json", by_alias=True))


@router.get("", response_model=ConfigResponse)
async def get_config(
    owner: str = Depends(get_owner_id),
    store: BaseKeyValueStore = Depends(get_store),
) -> ConfigResponse:
    """Get the owner's schema.

    Returns:
        The stored schema, or null when none exists.
    """
    try:
        return ConfigResponse(value=await load_schema(store, owner))

    except HTTPException:
        raise
    except StoreError as e:
        logger.error(f"Store error loading config for {owner}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Storage unavailable",
        ) from e
    except Exception as e:
        logger.error(f"Unexpected error in get_config: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred",
        ) from e


@router.put("", response_model=SuccessResponse)
async def put_config(
    schema: Schema,
    owner: str = Depends(get_owner_id),
    store: BaseKeyValueStore = Depends(get_store),
) -> SuccessResponse:
    """Replace the owner's schema.

    Args:
        schema: The new, already validated schema.
        owner: Owner id.
        store: Key-value store.

    Raises:
        HTTPException: If the stored schema is locked.
    """
    try:
        current = await load_schema(store, owner)
        if current is not None and current.locked:
            logger.warning(f"Rejected update of locked config for {owner}")
            raise HTTPException(
                status_code=status.HTTP_423_LOCKED,
                detail="Configuration is locked",
            )

        await _store_schema(store, owner, schema)
        logger.info(f"Saved config for {owner} ({len(schema.variables)} variables)")
        return SuccessResponse(message="Configuration saved")

    except HTTPException:
        raise
    except StoreError as e:
        logger.error(f"Store error saving config for {owner}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Storage unavailable",
        ) from e
    except Exception as e:
        logger.error(f"Unexpected error in put_config: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred",
        ) from e


@router.post("/lock", response_model=SuccessResponse)
async def lock_config(
    owner: str = Depends(get_owner_id),
    store: BaseKeyValueStore = Depends(get_store),
) -> SuccessResponse:
    """Lock the owner's schema against edits."""
    try:
        schema = await load_schema(store, owner)
        if schema is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Configuration not found",
            )

        await _store_schema(store, owner, schema.model_copy(update={"locked": True}))
        logger.info(f"Locked config for {owner}")
        return SuccessResponse(message="Configuration locked")

    except HTTPException:
        raise
    except StoreError:
        raise
    except Exception as e:
        logger.error(f"Unexpected error in lock_config: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred",
        ) from e


@router.post("/unlock", response_model=SuccessResponse)
async def unlock_config(
    request: UnlockRequest,
    owner: str = Depends(get_owner_id),
    store: BaseKeyValueStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
) -> SuccessResponse:
    """Unlock the owner's schema.

    Raises:
        HTTPException: If the password is wrong or no schema exists.
    """
    try:
        if not hmac.compare_digest(request.password.encode(), settings.unlock_password.encode()):
            logger.warning(f"Wrong unlock password for {owner}")
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Incorrect password",
            )

        schema = await load_schema(store, owner)
        if schema is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Configuration not found",
            )

        await _store_schema(store, owner, schema.model_copy(update={"locked": False}))
        logger.info(f"Unlocked config for {owner}")
        return SuccessResponse(message="Configuration unlocked")

    except HTTPException:
        raise
    except StoreError:
        raise
    except Exception as e:
        logger.error(f"Unexpected error in unlock_config: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred",
        ) from e


@router.post("/seed", response_model=SeedResponse)
async def seed_config(
    owner: str = Depends(get_owner_id),
    authorization: str | None = Header(default=None),
    store: BaseKeyValueStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
) -> SeedResponse:
    """Store the example advertising schema for the owner.

    Requires ``Authorization: Bearer <seed key>``. An existing schema is
    left untouched.
    """
    try:
        expected = f"Bearer {settings.seed_key}"
        if not authorization or not hmac.compare_digest(authorization.encode(), expected.encode()):
            logger.warning("Rejected seed request with bad authorization")
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Unauthorized",
            )

        schema, created = await seed_example_config(store, owner)
        if not created:
            return SeedResponse(message="Configuration already exists", existing=True, config=schema)
        return SeedResponse(message="Example configuration seeded", config=schema)

    except HTTPException:
        raise
    except StoreError:
        raise
    except Exception as e:
        logger.error(f"Unexpected error in seed_config: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred",
        ) from e
