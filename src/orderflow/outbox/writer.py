"""Outbox writer: persist an aggregate together with the events it raised."""

import structlog
from protean.core.unit_of_work import UnitOfWork
from protean.utils.globals import current_domain, current_uow

from orderflow.outbox.buffer import restore_events
from orderflow.outbox.serialization import event_type_of, extract_aggregate_id, serialize_event
from orderflow.outbox.store import OutboxStore

logger = structlog.get_logger(__name__)


class OutboxWriter:
    """Writes aggregate state and outbox rows in one unit of work.

    When a unit of work is already running (inside a command handler) the
    writes join it and commit with it. Otherwise the writer opens its own.
    Either the new state and all its outbox rows are stored, or none of them.
    """

    def __init__(self, store: OutboxStore | None = None):
        self.store = store or OutboxStore()

    def save(self, aggregate):
        events = aggregate.drain_events()
        try:
            rows = [(extract_aggregate_id(event), event_type_of(event), serialize_event(event)) for event in events]

            if current_uow and current_uow.in_progress:
                self._write(aggregate, rows)
            else:
                with UnitOfWork():
                    self._write(aggregate, rows)
        except Exception:
            restore_events(aggregate, events)
            raise

        logger.debug(
            "Aggregate saved",
            aggregate=type(aggregate).__name__,
            aggregate_id=str(aggregate.id),
            events=[row[1] for row in rows],
        )
        return aggregate

    def _write(self, aggregate, rows):
        current_domain.repository_for(type(aggregate)).add(aggregate)
        for aggregate_id, event_type, payload in rows:
            self.store.add(aggregate_id, event_type, payload)

    def dispatch(self, event):
        """Enqueue a standalone event that no aggregate save carries."""
        record = self.store.add(extract_aggregate_id(event), event_type_of(event), serialize_event(event))
        logger.debug(
            "Event dispatched",
            event_type=record.event_type,
            aggregate_id=record.aggregate_id,
        )
        return record
