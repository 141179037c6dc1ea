"""Outbox record aggregate: one serialized event awaiting delivery.

State Machine:
    PENDING → PROCESSING → COMPLETED
    PENDING → PROCESSING → FAILED → (requeue) → PENDING
    PENDING → FAILED  (the row could not even be claimed)
    PROCESSING → (release) → PENDING  (claimed by a tick that never finished)

Rows are never deleted; COMPLETED is final and FAILED rows stay put until an
operator re-queues them.
"""

from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import DateTime, Dict, Integer, String, Text

from orderflow.domain import orderflow


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OutboxStatus(Enum):
    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


# ---------------------------------------------------------------------------
# State Machine
# ---------------------------------------------------------------------------
_VALID_TRANSITIONS = {
    OutboxStatus.PENDING: {OutboxStatus.PROCESSING, OutboxStatus.FAILED},
    OutboxStatus.PROCESSING: {OutboxStatus.COMPLETED, OutboxStatus.FAILED, OutboxStatus.PENDING},  # Via release
    OutboxStatus.FAILED: {OutboxStatus.PENDING},  # Via requeue
    OutboxStatus.COMPLETED: set(),  # Terminal
}


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@orderflow.aggregate
class OutboxRecord:
    aggregate_id: String(max_length=255, required=True)
    event_type: String(max_length=255, required=True)
    payload: Dict(required=True)
    status: String(choices=OutboxStatus, default=OutboxStatus.PENDING.value)
    retry_count: Integer(default=0, min_value=0)
    error_message: Text()
    created_at: DateTime(default=lambda: datetime.now(UTC))
    claimed_at: DateTime()
    processed_at: DateTime()

    @classmethod
    def for_event(cls, aggregate_id, event_type, payload):
        """Create a PENDING row for a serialized event."""
        return cls(
            aggregate_id=str(aggregate_id),
            event_type=event_type,
            payload=payload,
            status=OutboxStatus.PENDING.value,
            retry_count=0,
            created_at=datetime.now(UTC),
        )

    # -------------------------------------------------------------------
    # State transitions
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target_status):
        current = OutboxStatus(self.status)
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise ValidationError({"status": [f"Cannot transition from {current.value} to {target_status.value}"]})

    def start_processing(self):
        self._assert_can_transition(OutboxStatus.PROCESSING)
        self.status = OutboxStatus.PROCESSING.value
        self.claimed_at = datetime.now(UTC)

    def complete(self):
        self._assert_can_transition(OutboxStatus.COMPLETED)
        self.status = OutboxStatus.COMPLETED.value
        self.error_message = None
        self.processed_at = datetime.now(UTC)

    def fail(self, message):
        self._assert_can_transition(OutboxStatus.FAILED)
        self.status = OutboxStatus.FAILED.value
        self.error_message = message
        self.processed_at = datetime.now(UTC)

    def requeue(self):
        """Put a failed row back in line for the next tick."""
        if OutboxStatus(self.status) != OutboxStatus.FAILED:
            raise ValidationError({"status": [f"Only failed rows can be re-queued, row is {self.status}"]})
        self.status = OutboxStatus.PENDING.value
        self.retry_count = self.retry_count + 1
        self.error_message = None
        self.processed_at = None
        self.claimed_at = None

    def release(self):
        """Return a row abandoned mid-delivery to PENDING. Counts as an attempt."""
        if OutboxStatus(self.status) != OutboxStatus.PROCESSING:
            raise ValidationError({"status": [f"Only processing rows can be released, row is {self.status}"]})
        self.status = OutboxStatus.PENDING.value
        self.retry_count = self.retry_count + 1
        self.claimed_at = None

    @property
    def is_final(self) -> bool:
        return OutboxStatus(self.status) == OutboxStatus.COMPLETED
