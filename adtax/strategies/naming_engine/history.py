"""History helpers: legacy migration and batch grouping."""

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError

from adtax.strategies.naming_engine.composer import now_ms
from adtax.strategies.naming_engine.models import GeneratedRecord, Schema
from adtax.strategies.naming_engine.parser import parse

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HistoryBatch:
    """Records produced by one generation action."""

    timestamp: int
    records: tuple[GeneratedRecord, ...]


def migrate_history(
    entries: Iterable[Any],
    schema: Schema,
    now: int | None = None,
) -> list[GeneratedRecord]:
    """Convert stored history of any vintage into structured records.

    Bare strings come from the original flat storage: each becomes a
    record whose metadata is re-derived by parsing. Mappings are kept when
    they carry a non-empty ``fileName``; missing metadata becomes empty and
    a missing timestamp becomes *now*. Anything else is dropped.

    Args:
        entries: Stored history entries, newest first.
        schema: Schema used to parse bare file names.
        now: Fallback timestamp in epoch milliseconds. Defaults to now.

    Returns:
        The migrated records, in input order.
    """
    now = now_ms() if now is None else now
    migrated: list[GeneratedRecord] = []
    dropped = 0

    for entry in entries:
        if isinstance(entry, str):
            if entry.strip():
                migrated.append(
                    GeneratedRecord(file_name=entry, metadata=parse(entry, schema), timestamp=now)
                )
            else:
                dropped += 1
            continue

        if isinstance(entry, GeneratedRecord):
            migrated.append(entry)
            continue

        if not isinstance(entry, dict) or not entry.get("fileName"):
            dropped += 1
            continue

        try:
            migrated.append(
                GeneratedRecord.model_validate(
                    {
                        "fileName": entry["fileName"],
                        "metadata": entry.get("metadata") or {},
                        "timestamp": entry.get("timestamp") or now,
                    }
                )
            )
        except ValidationError as e:
            logger.warning(f"Dropping malformed history entry: {e.errors()}")
            dropped += 1

    if dropped:
        logger.info(f"History migration dropped {dropped} unusable entries")

    return migrated


def group_batches(records: Sequence[GeneratedRecord]) -> list[HistoryBatch]:
    """Group consecutive records that share a timestamp, keeping order."""
    batches: list[HistoryBatch] = []
    current: list[GeneratedRecord] = []

    for record in records:
        if current and record.timestamp != current[0].timestamp:
            batches.append(HistoryBatch(timestamp=current[0].timestamp, records=tuple(current)))
            current = []
        current.append(record)

    if current:
        batches.append(HistoryBatch(timestamp=current[0].timestamp, records=tuple(current)))

    return batches
