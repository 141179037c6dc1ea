"""Outbox store: reads and status updates over the outbox table."""

from datetime import UTC, datetime

import structlog
from protean.utils.globals import current_domain

from orderflow.outbox.record import OutboxRecord, OutboxStatus

logger = structlog.get_logger(__name__)


def _aware(value: datetime) -> datetime:
    """SQL backends may hand timestamps back without a zone; they are stored in UTC."""
    return value if value.tzinfo else value.replace(tzinfo=UTC)


class OutboxStore:
    """Thin access layer over the ``OutboxRecord`` repository.

    Status updates load the row by id, apply the transition on the record
    and save it back, so every change goes through the record's state
    machine.
    """

    @property
    def repo(self):
        return current_domain.repository_for(OutboxRecord)

    def add(self, aggregate_id, event_type, payload) -> OutboxRecord:
        record = OutboxRecord.for_event(aggregate_id, event_type, payload)
        self.repo.add(record)
        return record

    def get(self, record_id) -> OutboxRecord:
        return self.repo.get(record_id)

    def pending(self, limit: int = 10) -> list[OutboxRecord]:
        """Oldest PENDING rows first."""
        return (
            self.repo._dao.query.filter(status=OutboxStatus.PENDING.value)
            .order_by("created_at")
            .limit(limit)
            .all()
            .items
        )

    def failed(self) -> list[OutboxRecord]:
        return self.repo._dao.query.filter(status=OutboxStatus.FAILED.value).order_by("created_at").all().items

    def stale_processing(self, older_than: datetime) -> list[OutboxRecord]:
        """PROCESSING rows claimed before ``older_than``."""
        rows = self.repo._dao.query.filter(status=OutboxStatus.PROCESSING.value).order_by("created_at").all().items
        return [row for row in rows if row.claimed_at is None or _aware(row.claimed_at) < older_than]

    def for_aggregate(self, aggregate_id) -> list[OutboxRecord]:
        return self.repo._dao.query.filter(aggregate_id=str(aggregate_id)).order_by("created_at").all().items

    def mark_processing(self, record_id) -> OutboxRecord:
        record = self.get(record_id)
        record.start_processing()
        self.repo.add(record)
        return record

    def mark_completed(self, record_id) -> OutboxRecord:
        record = self.get(record_id)
        record.complete()
        self.repo.add(record)
        return record

    def mark_failed(self, record_id, message) -> OutboxRecord:
        record = self.get(record_id)
        record.fail(message)
        self.repo.add(record)
        return record

    def requeue(self, record_id) -> OutboxRecord:
        record = self.get(record_id)
        record.requeue()
        self.repo.add(record)
        logger.info(
            "Outbox record re-queued",
            record_id=str(record.id),
            event_type=record.event_type,
            retry_count=record.retry_count,
        )
        return record

    def release(self, record_id) -> OutboxRecord:
        record = self.get(record_id)
        record.release()
        self.repo.add(record)
        logger.warning(
            "Outbox record released from processing",
            record_id=str(record.id),
            event_type=record.event_type,
            retry_count=record.retry_count,
        )
        return record

    def count_by_status(self) -> dict[str, int]:
        return {
            status.value: self.repo._dao.query.filter(status=status.value).all().total for status in OutboxStatus
        }
