"""API key issuing and validation.

Plain keys are returned once at creation; only their SHA-256 hash is
stored. Key metadata lives under two keys, one addressed by hash for
validation and one by key id for listing and revocation.
"""

import hashlib
import logging
import secrets
import time
from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from adtax.core.storage_keys import API_KEYS_INDEX, api_key_hash_key, key_meta_key
from adtax.interfaces.store import BaseKeyValueStore

logger = logging.getLogger(__name__)

KEY_PREFIX = "adtax"


class ApiKeyData(BaseModel):
    """Stored metadata for an issued API key."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    key_id: str
    name: str
    environment: Literal["live", "test"]
    key_hash: str | None = Field(default=None, exclude=True)
    created_at: str
    last_used: str | None = None
    usage_count: int = 0


def generate_api_key(environment: str = "live") -> str:
    """Return a new plain API key, e.g. ``adtax_live_<random>``."""
    return f"{KEY_PREFIX}_{environment}_{secrets.token_urlsafe(32)}"


def hash_api_key(api_key: str) -> str:
    """SHA-256 hex digest of *api_key*."""
    return hashlib.sha256(api_key.encode("utf-8")).hexdigest()


def generate_key_id() -> str:
    return f"key_{int(time.time() * 1000)}_{secrets.token_hex(5)}"


def _isoformat_now() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


async def _load_index(store: BaseKeyValueStore) -> list[str]:
    index = await store.get(API_KEYS_INDEX)
    return [key_id for key_id in index if isinstance(key_id, str)] if isinstance(index, list) else []


async def issue_api_key(
    store: BaseKeyValueStore,
    name: str,
    environment: Literal["live", "test"],
    ttl_seconds: int,
) -> tuple[str, ApiKeyData]:
    """Create and store a new API key.

    Returns:
        The plain key (shown once) and its stored metadata.
    """
    api_key = generate_api_key(environment)
    key_hash = hash_api_key(api_key)
    key_data = ApiKeyData(
        key_id=generate_key_id(),
        name=name,
        environment=environment,
        created_at=_isoformat_now(),
    )
    payload = key_data.model_dump(mode="json", by_alias=True)
    payload["keyHash"] = key_hash

    await store.set(api_key_hash_key(key_hash), payload, ttl_seconds=ttl_seconds)
    await store.set(key_meta_key(key_data.key_id), payload, ttl_seconds=ttl_seconds)

    index = await _load_index(store)
    if key_data.key_id not in index:
        index.append(key_data.key_id)
        await store.set(API_KEYS_INDEX, index)

    logger.info(f"Issued API key {key_data.key_id} ({environment})")
    return api_key, key_data


async def validate_api_key(
    store: BaseKeyValueStore,
    api_key: str | None,
    ttl_seconds: int,
) -> ApiKeyData | None:
    """Return metadata for a valid *api_key*, recording the use.

    Returns None for a missing, unknown or revoked key.
    """
    if not api_key:
        return None

    key_hash = hash_api_key(api_key)
    raw = await store.get(api_key_hash_key(key_hash))
    if not isinstance(raw, dict):
        return None

    try:
        key_data = ApiKeyData.model_validate(raw)
    except ValidationError as e:
        logger.error(f"Stored API key record is malformed: {e.errors()}")
        return None

    if await store.get(key_meta_key(key_data.key_id)) is None:
        logger.warning(f"Rejected revoked API key {key_data.key_id}")
        return None

    key_data.last_used = _isoformat_now()
    key_data.usage_count += 1

    payload = key_data.model_dump(mode="json", by_alias=True)
    payload["keyHash"] = key_hash
    await store.set(api_key_hash_key(key_hash), payload, ttl_seconds=ttl_seconds)
    await store.set(key_meta_key(key_data.key_id), payload, ttl_seconds=ttl_seconds)

    return key_data


async def list_api_keys(store: BaseKeyValueStore) -> list[ApiKeyData]:
    """Metadata of every live key, in issue order."""
    keys = []
    for key_id in await _load_index(store):
        raw = await store.get(key_meta_key(key_id))
        if isinstance(raw, dict):
            keys.append(ApiKeyData.model_validate(raw))
    return keys


async def get_api_key(store: BaseKeyValueStore, key_id: str) -> ApiKeyData | None:
    raw = await store.get(key_meta_key(key_id))
    return ApiKeyData.model_validate(raw) if isinstance(raw, dict) else None


async def revoke_api_key(store: BaseKeyValueStore, key_id: str) -> bool:
    """Revoke *key_id*. Returns False when the key does not exist."""
    raw = await store.get(key_meta_key(key_id))
    if not isinstance(raw, dict):
        return False

    key_hash = raw.get("keyHash")
    if isinstance(key_hash, str):
        await store.delete(api_key_hash_key(key_hash))
    await store.delete(key_meta_key(key_id))

    index = await _load_index(store)
    if key_id in index:
        index.remove(key_id)
        await store.set(API_KEYS_INDEX, index)

    logger.info(f"Revoked API key {key_id}")
    return True
