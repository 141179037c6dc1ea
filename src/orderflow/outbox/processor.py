"""Outbox processor: delivers PENDING rows to their registered handlers.

Each tick claims up to ``batch_size`` PENDING rows, oldest first, and for
each row:

1. marks it PROCESSING,
2. rebuilds an ``EventEnvelope`` from the stored payload,
3. calls every handler registered for the event type, in order,
4. marks it COMPLETED, or FAILED with the last handler error.

A row nobody subscribed to is COMPLETED. Handler errors are logged and kept
on the row; they never escape the tick, and handlers that already ran are
not undone. Delivery is at-least-once, so handlers must be idempotent.
"""

import threading
from datetime import UTC, datetime, timedelta

import structlog
from protean.utils.globals import current_domain
from shared.events.envelope import EventEnvelope

from orderflow.outbox.registry import EventHandlerRegistry
from orderflow.outbox.store import OutboxStore
from orderflow.utils.logging import bind_context, clear_context

logger = structlog.get_logger(__name__)

DEFAULT_POLL_INTERVAL_SECONDS = 5
DEFAULT_BATCH_SIZE = 10
DEFAULT_MAX_RETRIES = 3
DEFAULT_PROCESSING_TIMEOUT_SECONDS = 300


def outbox_settings() -> dict:
    """Outbox tunables from the domain's ``[custom.outbox]`` config table."""
    settings = {
        "poll_interval_seconds": DEFAULT_POLL_INTERVAL_SECONDS,
        "batch_size": DEFAULT_BATCH_SIZE,
        "max_retries": DEFAULT_MAX_RETRIES,
        "processing_timeout_seconds": DEFAULT_PROCESSING_TIMEOUT_SECONDS,
    }
    custom = current_domain.config.get("custom") or {}
    settings.update(custom.get("outbox") or {})
    return settings


def _error_message(exc: Exception) -> str:
    return str(exc) or type(exc).__name__


class OutboxProcessor:
    def __init__(
        self,
        store: OutboxStore,
        registry: EventHandlerRegistry,
        batch_size: int = DEFAULT_BATCH_SIZE,
        max_retries: int = DEFAULT_MAX_RETRIES,
    ):
        self.store = store
        self.registry = registry
        self.batch_size = batch_size
        self.max_retries = max_retries
        self._run_lock = threading.Lock()

    def tick(self) -> int:
        """Process one batch. Returns the number of rows handled.

        Overlapping calls do not wait: a tick that finds another one running
        returns 0 straight away.
        """
        if not self._run_lock.acquire(blocking=False):
            logger.warning("Outbox tick skipped, previous tick still running")
            return 0

        try:
            try:
                records = self.store.pending(self.batch_size)
            except Exception:
                logger.exception("Could not load pending outbox records")
                return 0

            for record in records:
                self._process(record)

            if records:
                logger.info("Outbox batch processed", count=len(records))
            return len(records)
        finally:
            self._run_lock.release()

    def _process(self, record) -> None:
        bind_context(outbox_record_id=str(record.id), event_type=record.event_type)
        try:
            self._deliver(record)
        finally:
            clear_context("outbox_record_id", "event_type")

    def _deliver(self, record) -> None:
        record_id = record.id
        try:
            record = self.store.mark_processing(record_id)
            envelope = EventEnvelope.from_payload(
                record.payload,
                event_type=record.event_type,
                aggregate_id=record.aggregate_id,
                record_id=str(record_id),
            )

            handlers = self.registry.handlers_for(record.event_type)
            if not handlers:
                logger.warning("No handlers registered for event", event_type=record.event_type)
                self.store.mark_completed(record_id)
                return

            error = None
            for handler in handlers:
                try:
                    handler.handle(envelope)
                except Exception as exc:
                    error = _error_message(exc)
                    logger.exception(
                        "Event handler failed",
                        handler=type(handler).__name__,
                        event_type=record.event_type,
                        record_id=str(record_id),
                    )

            if error is None:
                self.store.mark_completed(record_id)
            else:
                self.store.mark_failed(record_id, error)
        except Exception as exc:
            logger.exception("Outbox record processing failed", record_id=str(record_id))
            try:
                self.store.mark_failed(record_id, _error_message(exc))
            except Exception:
                logger.exception("Could not mark outbox record as failed", record_id=str(record_id))

    def requeue_failed(self, max_retries: int | None = None) -> int:
        """Send FAILED rows back to PENDING, up to ``max_retries`` times each.

        Never called by ``tick()``; this is an operator action.
        """
        limit = self.max_retries if max_retries is None else max_retries
        requeued = 0
        for record in self.store.failed():
            if record.retry_count >= limit:
                logger.warning(
                    "Outbox record exhausted its retries",
                    record_id=str(record.id),
                    retry_count=record.retry_count,
                )
                continue
            self.store.requeue(record.id)
            requeued += 1
        return requeued

    def reclaim_stuck(self, older_than_seconds: float, max_retries: int | None = None) -> int:
        """Recover rows left PROCESSING by a tick that died mid-delivery.

        Rows claimed more than ``older_than_seconds`` ago go back to PENDING.
        Rows that already used up ``max_retries`` are marked FAILED instead,
        so they surface with the rest of the failures. Never called by
        ``tick()``; this is an operator action.
        """
        limit = self.max_retries if max_retries is None else max_retries
        cutoff = datetime.now(UTC) - timedelta(seconds=older_than_seconds)
        released = 0
        for record in self.store.stale_processing(cutoff):
            if record.retry_count >= limit:
                self.store.mark_failed(record.id, "Abandoned while processing")
                continue
            self.store.release(record.id)
            released += 1
        return released
