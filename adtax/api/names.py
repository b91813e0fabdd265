"""Generated name API routes.

Handles generation, history, parsing and legacy migration of file names.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from adtax.api.deps import (
    get_factory,
    get_owner_id,
    get_store,
    load_history,
    load_schema,
    require_schema,
    save_history,
)
from adtax.api.schemas import (
    BatchListResponse,
    BatchResponse,
    GenerateRequest,
    GenerateResponse,
    HistoryResponse,
    MigrateRequest,
    ParseRequest,
    ParseResponse,
    SuccessResponse,
)
from adtax.core.factory import ComponentFactory
from adtax.core.storage_keys import names_key
from adtax.interfaces.store import BaseKeyValueStore, StoreError
from adtax.strategies.naming_engine import Schema, group_batches, migrate_history

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/names", tags=["names"])


@router.get("", response_model=HistoryResponse)
async def list_names(
    owner: str = Depends(get_owner_id),
    store: BaseKeyValueStore = Depends(get_store),
) -> HistoryResponse:
    """List the owner's generated names, newest first."""
    try:
        records = await load_history(store, owner, await load_schema(store, owner))
        return HistoryResponse(records=records, total=len(records))

    except HTTPException:
        raise
    except StoreError:
        raise
    except Exception as e:
        logger.error(f"Unexpected error in list_names: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred",
        ) from e


@router.get("/batches", response_model=BatchListResponse)
async def list_batches(
    owner: str = Depends(get_owner_id),
    store: BaseKeyValueStore = Depends(get_store),
) -> BatchListResponse:
    """List the owner's history grouped by generation action."""
    try:
        records = await load_history(store, owner, await load_schema(store, owner))
        batches = [BatchResponse.from_batch(batch) for batch in group_batches(records)]
        return BatchListResponse(batches=batches, total=len(batches))

    except HTTPException:
        raise
    except StoreError:
        raise
    except Exception as e:
        logger.error(f"Unexpected error in list_batches: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred",
        ) from e


@router.post("/generate", response_model=GenerateResponse, status_code=status.HTTP_201_CREATED)
async def generate_names(
    request: GenerateRequest,
    owner: str = Depends(get_owner_id),
    schema: Schema = Depends(require_schema),
    store: BaseKeyValueStore = Depends(get_store),
    factory: ComponentFactory = Depends(get_factory),
) -> GenerateResponse:
    """Generate file names from the selected values.

    A multi-select field with several values fans out into one record per
    value. New records are prepended to the owner's history.

    Args:
        request: Selected values.
        owner: Owner id.
        schema: The owner's schema.
        store: Key-value store.
        factory: Component factory.

    Returns:
        The generated batch.

    Raises:
        HTTPException: If nothing could be generated from the selection.
    """
    try:
        records = factory.get_composer().generate(schema, request.values)
        if not records:
            logger.info(f"Nothing to generate for {owner}")
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="No values selected",
            )

        history = await load_history(store, owner, schema)
        await save_history(store, owner, records + history)

        logger.info(f"Generated {len(records)} name(s) for {owner}")
        return GenerateResponse(timestamp=records[0].timestamp, records=records)

    except HTTPException:
        raise
    except StoreError:
        raise
    except Exception as e:
        logger.error(f"Unexpected error in generate_names: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred",
        ) from e


@router.post("/parse", response_model=ParseResponse)
async def parse_file_name(
    request: ParseRequest,
    schema: Schema = Depends(require_schema),
    factory: ComponentFactory = Depends(get_factory),
) -> ParseResponse:
    """Recover field values from an existing file name."""
    try:
        parsed = factory.get_parser().parse(request.file_name, schema)
        if parsed.is_ambiguous:
            logger.debug(
                f"Ambiguous parse of {request.file_name!r}: "
                f"{parsed.segment_count} segments for {parsed.variable_count} variables"
            )
        return ParseResponse.from_parsed(parsed)

    except HTTPException:
        raise
    except StoreError:
        raise
    except Exception as e:
        logger.error(f"Unexpected error in parse_file_name: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred",
        ) from e


@router.post("/migrate", response_model=HistoryResponse)
async def migrate_names(
    request: MigrateRequest,
    owner: str = Depends(get_owner_id),
    store: BaseKeyValueStore = Depends(get_store),
) -> HistoryResponse:
    """Import legacy history and store it as the owner's history.

    Bare file names are parsed against the owner's schema when one exists.
    """
    try:
        schema = await load_schema(store, owner) or Schema()
        records = migrate_history(request.entries, schema)
        await save_history(store, owner, records)

        logger.info(f"Migrated {len(records)} of {len(request.entries)} entries for {owner}")
        return HistoryResponse(records=records, total=len(records))

    except HTTPException:
        raise
    except StoreError:
        raise
    except Exception as e:
        logger.error(f"Unexpected error in migrate_names: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred",
        ) from e


@router.delete("/{index}", response_model=SuccessResponse)
async def delete_name(
    index: int,
    owner: str = Depends(get_owner_id),
    store: BaseKeyValueStore = Depends(get_store),
) -> SuccessResponse:
    """Delete one history entry by its position (0 is newest)."""
    try:
        history = await load_history(store, owner, await load_schema(store, owner))
        if not 0 <= index < len(history):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"No history entry at index {index}",
            )

        removed = history.pop(index)
        await save_history(store, owner, history)

        logger.info(f"Deleted {removed.file_name!r} from history of {owner}")
        return SuccessResponse(message="Entry deleted")

    except HTTPException:
        raise
    except StoreError:
        raise
    except Exception as e:
        logger.error(f"Unexpected error in delete_name: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred",
        ) from e


@router.delete("", response_model=SuccessResponse)
async def clear_names(
    owner: str = Depends(get_owner_id),
    store: BaseKeyValueStore = Depends(get_store),
) -> SuccessResponse:
    """Clear the owner's history."""
    try:
        await store.delete(names_key(owner))
        logger.info(f"Cleared history of {owner}")
        return SuccessResponse(message="History cleared")

    except HTTPException:
        raise
    except StoreError:
        raise
    except Exception as e:
        logger.error(f"Unexpected error in clear_names: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred",
        ) from e
