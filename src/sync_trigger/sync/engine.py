"""
Incremental emission engine.

Turns one API response envelope into an ordered stream of ``data``
events followed by one ``snapshot`` event, emitting only records newer
than the snapshot watermark and advancing the watermark to the newest
emitted record.
"""

import logging
from typing import Any, Optional

from ..core.models import (
    Envelope, EventType, NoRecords, RecordCollection, SingleRecord, Snapshot,
    SyncResult, UNSET_WATERMARK, classify_data,
)
from ..core.sink import EmitFn
from .paths import is_truthy, resolve_path
from .watermark import is_after, is_unset


class IncrementalEmitter:
    """
    Emits new records and advances the snapshot watermark.

    The emitter is stateless between calls; the snapshot passed to
    ``synchronize`` is the only state and is updated in place. Callers must
    not run two cycles against the same snapshot concurrently.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Initialize the emitter.

        Args:
            logger: Logger for cycle progress (defaults to this module's logger)
        """
        self.logger = logger or logging.getLogger(__name__)

    @staticmethod
    def record_timestamp(record: Any, record_key: Optional[str], fallback_key: Optional[str]) -> Any:
        """
        Resolve the comparison timestamp of one record.

        The record-level key wins unless it resolves to a falsy value, in
        which case the fallback key is used.
        """
        value = resolve_path(record, record_key) if record_key else None
        if is_truthy(value):
            return value
        return resolve_path(record, fallback_key) if fallback_key else None

    async def synchronize(
        self,
        envelope: Envelope,
        snapshot: Snapshot,
        record_key: Optional[str],
        fallback_key: Optional[str],
        emit: EmitFn,
    ) -> SyncResult:
        """
        Run one synchronization cycle.

        Args:
            envelope: Metadata plus extracted response data
            snapshot: Watermark, updated in place
            record_key: Dotted path to the record-level timestamp
            fallback_key: Dotted path used when the record-level key is falsy
            emit: Async callback receiving (event_type, payload)

        Returns:
            SyncResult describing the completed cycle

        Raises:
            Whatever ``emit`` raises; the watermark is then left untouched
        """
        shape = classify_data(envelope.data)
        watermark_before = snapshot.last_updated

        if isinstance(shape, NoRecords):
            self.logger.info("No data found in response, nothing to emit")
            return SyncResult(
                shape="none",
                watermark_before=watermark_before,
                watermark_after=snapshot.last_updated,
            )

        if isinstance(shape, SingleRecord):
            self.logger.info("Found one item in response data, going to emit...")
            await emit(EventType.DATA.value, envelope)
            return SyncResult(
                shape="single",
                records_seen=1,
                records_emitted=1,
                watermark_before=watermark_before,
                watermark_after=snapshot.last_updated,
            )

        return await self._synchronize_collection(
            envelope, shape, snapshot, record_key, fallback_key, emit
        )

    async def _synchronize_collection(
        self,
        envelope: Envelope,
        shape: RecordCollection,
        snapshot: Snapshot,
        record_key: Optional[str],
        fallback_key: Optional[str],
        emit: EmitFn,
    ) -> SyncResult:
        records = shape.records
        watermark_before = snapshot.last_updated
        has_watermark = snapshot.is_set

        self.logger.info(f"Found {len(records)} items in response data")

        running_max = UNSET_WATERMARK
        emitted = 0

        for record in records:
            timestamp = self.record_timestamp(record, record_key, fallback_key)

            if has_watermark and not is_after(timestamp, snapshot.last_updated):
                continue

            await emit(EventType.DATA.value, envelope.with_data(record))
            emitted += 1

            if is_after(timestamp, running_max):
                running_max = timestamp

        self.logger.info(f"{emitted} items were emitted")

        if not is_unset(running_max):
            snapshot.last_updated = running_max

        await emit(EventType.SNAPSHOT.value, snapshot)
        self.logger.info(f"A new snapshot was emitted: {snapshot.to_dict()}")

        return SyncResult(
            shape="collection",
            records_seen=len(records),
            records_emitted=emitted,
            snapshot_emitted=True,
            watermark_before=watermark_before,
            watermark_after=snapshot.last_updated,
        )


async def synchronize(
    envelope: Envelope,
    snapshot: Snapshot,
    record_key: Optional[str],
    fallback_key: Optional[str],
    emit: EmitFn,
    logger: Optional[logging.Logger] = None,
) -> SyncResult:
    """Convenience wrapper around IncrementalEmitter.synchronize."""
    emitter = IncrementalEmitter(logger=logger)
    return await emitter.synchronize(envelope, snapshot, record_key, fallback_key, emit)
