"""
Polling loop around the trigger processor.
"""

import asyncio
import json
import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, List, Optional

from ..core.logging import CorrelationContext, log_with_context
from ..core.models import CycleMetrics, EventType, IncomingMessage
from ..core.sink import EventSink
from ..core.snapshot_store import SnapshotStore
from .trigger_processor import TriggerProcessor


logger = logging.getLogger(__name__)


@dataclass
class RunnerConfig:
    """
    Polling runner settings.

    Attributes:
        interval_seconds: Pause between the end of one cycle and the next
        max_cycles: Stop after this many cycles (None = run until stopped)
        stop_on_error: Stop the loop at the first failed cycle
    """
    interval_seconds: float = 60.0
    max_cycles: Optional[int] = None
    stop_on_error: bool = False


class PollingRunner:
    """
    Runs poll cycles one after another against a persisted snapshot.

    Per cycle:
    1. Load the snapshot for the trigger
    2. Run the processor, forwarding events to the sink
    3. Save the snapshot once the sink has accepted the snapshot event

    A failed cycle never saves its snapshot, so the next cycle starts
    from the last stored watermark and re-emits anything not yet covered.
    """

    def __init__(
        self,
        processor: TriggerProcessor,
        store: SnapshotStore,
        sink: EventSink,
        config: Optional[RunnerConfig] = None,
        message: Optional[IncomingMessage] = None,
        trigger_key: Optional[str] = None,
    ):
        """
        Initialize the polling runner.

        Args:
            processor: Trigger processor for the polled operation
            store: Snapshot store
            sink: Event sink receiving data and snapshot events
            config: Runner settings
            message: Inbound message reused for every cycle
            trigger_key: Snapshot key (defaults to the operation id)
        """
        self.processor = processor
        self.store = store
        self.sink = sink
        self.config = config or RunnerConfig()
        self.message = message or IncomingMessage()
        self.trigger_key = trigger_key or processor.operation.operation_id
        self.history: List[CycleMetrics] = []
        self._stop_requested = False

    def stop(self) -> None:
        """Request the loop to stop after the current cycle."""
        self._stop_requested = True

    async def run_cycle(self, message: Optional[IncomingMessage] = None) -> CycleMetrics:
        """
        Run a single poll cycle.

        Args:
            message: Inbound message (defaults to the runner's message)

        Returns:
            CycleMetrics for the cycle
        """
        message = message or self.message
        metrics = CycleMetrics(
            cycle_id=str(uuid.uuid4()),
            operation_id=self.processor.operation.operation_id,
        )
        oih_uid = (message.metadata or {}).get("oihUid")

        async def emit(event_type: str, payload: Any) -> None:
            await self.sink.emit(event_type, payload)
            if event_type == EventType.SNAPSHOT.value:
                # Blocking write; cycles never overlap on this loop
                self.store.save(self.trigger_key, payload)
                metrics.snapshot_saved = True
            elif event_type == EventType.DATA.value:
                metrics.records_emitted += 1

        with CorrelationContext(
            cycle_id=metrics.cycle_id,
            operation_id=metrics.operation_id,
            oihUid=oih_uid,
        ):
            try:
                snapshot = self.store.load(self.trigger_key)
                log_with_context(logger, logging.INFO, "Starting cycle with snapshot %s", snapshot.to_dict())

                result = await self.processor.process(message, snapshot, emit)

                metrics.status = "completed"
                if result.sync is None:
                    log_with_context(logger, logging.INFO, "Cycle returned data without emitting")
                else:
                    log_with_context(
                        logger,
                        logging.INFO,
                        "Cycle complete: %s/%s records emitted, watermark %s -> %s",
                        result.sync.records_emitted,
                        result.sync.records_seen,
                        result.sync.watermark_before,
                        result.sync.watermark_after,
                    )
            except Exception as e:
                metrics.status = "failed"
                metrics.error_message = str(e)
                logger.exception(f"Cycle {metrics.cycle_id} failed: {e}")
            finally:
                metrics.ended_at = datetime.now(timezone.utc)

        self.history.append(metrics)
        return metrics

    async def run(self) -> List[CycleMetrics]:
        """
        Run cycles until max_cycles is reached or stop() is called.

        Returns:
            Metrics of the cycles run by this call
        """
        self._stop_requested = False
        cycles: List[CycleMetrics] = []

        logger.info(
            f"Starting polling for {self.trigger_key}: interval={self.config.interval_seconds}s "
            f"max_cycles={self.config.max_cycles}"
        )

        while not self._stop_requested:
            metrics = await self.run_cycle()
            cycles.append(metrics)

            if metrics.status == "failed" and self.config.stop_on_error:
                logger.error("Stopping after failed cycle")
                break
            if self.config.max_cycles is not None and len(cycles) >= self.config.max_cycles:
                logger.info(f"Reached max cycles limit: {self.config.max_cycles}")
                break
            if self._stop_requested:
                break

            await asyncio.sleep(self.config.interval_seconds)

        summary = {
            "cycles": len(cycles),
            "failed": sum(1 for m in cycles if m.status == "failed"),
            "records_emitted": sum(m.records_emitted for m in cycles),
        }
        logger.info(f"Polling finished: {json.dumps(summary)}")
        return cycles

    def close(self) -> None:
        """Close all resources."""
        logger.info("Closing runner resources")
        self.processor.connector.close()
        self.sink.close()
        self.store.close()
