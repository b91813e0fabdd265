"""Usage analytics API routes."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from adtax.api.deps import get_factory, get_owner_id, get_store, load_history, require_schema
from adtax.api.schemas import AnalyticsResponse, VariableUsageResponse
from adtax.core.factory import ComponentFactory
from adtax.interfaces.store import BaseKeyValueStore, StoreError
from adtax.strategies.naming_engine import Schema

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/analytics", tags=["analytics"])


@router.get("", response_model=AnalyticsResponse)
async def get_analytics(
    owner: str = Depends(get_owner_id),
    schema: Schema = Depends(require_schema),
    store: BaseKeyValueStore = Depends(get_store),
    factory: ComponentFactory = Depends(get_factory),
) -> AnalyticsResponse:
    """Per-variable usage statistics over the owner's history.

    Variables that were never used are omitted; the rest are ordered by
    total usage, highest first.
    """
    try:
        records = await load_history(store, owner, schema)
        stats = factory.get_aggregator().aggregate(schema, records)

        return AnalyticsResponse(
            record_count=len(records),
            variables=[VariableUsageResponse.from_stats(entry) for entry in stats],
        )

    except HTTPException:
        raise
    except StoreError:
        raise
    except Exception as e:
        logger.error(f"Unexpected error in get_analytics: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred",
        ) from e
