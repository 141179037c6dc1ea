"""Tests for the OutboxRecord state machine."""

import pytest
from orderflow.outbox.record import OutboxRecord, OutboxStatus
from protean.exceptions import ValidationError


def _record():
    return OutboxRecord.for_event("agg-1", "SomethingHappened", {"event_type": "SomethingHappened"})


class TestNewRecord:
    def test_starts_pending_with_no_retries(self):
        record = _record()
        assert record.status == OutboxStatus.PENDING.value
        assert record.retry_count == 0
        assert record.error_message is None
        assert record.processed_at is None
        assert record.created_at is not None

    def test_keeps_aggregate_id_as_string(self):
        record = OutboxRecord.for_event(123, "X", {"event_type": "X"})
        assert record.aggregate_id == "123"


class TestTransitions:
    def test_pending_to_processing_to_completed(self):
        record = _record()
        record.start_processing()
        assert record.status == OutboxStatus.PROCESSING.value

        record.complete()
        assert record.status == OutboxStatus.COMPLETED.value
        assert record.processed_at is not None
        assert record.is_final

    def test_processing_to_failed_keeps_message(self):
        record = _record()
        record.start_processing()
        record.fail("boom")

        assert record.status == OutboxStatus.FAILED.value
        assert record.error_message == "boom"
        assert record.processed_at is not None

    def test_pending_can_fail_directly(self):
        record = _record()
        record.fail("could not claim")
        assert record.status == OutboxStatus.FAILED.value

    def test_requeue_resets_failed_row(self):
        record = _record()
        record.start_processing()
        record.fail("boom")

        record.requeue()

        assert record.status == OutboxStatus.PENDING.value
        assert record.retry_count == 1
        assert record.error_message is None
        assert record.processed_at is None


class TestRelease:
    def test_claim_is_timestamped(self):
        record = _record()
        record.start_processing()

        assert record.claimed_at is not None

    def test_release_returns_claimed_row_to_pending(self):
        record = _record()
        record.start_processing()

        record.release()

        assert record.status == OutboxStatus.PENDING.value
        assert record.retry_count == 1
        assert record.claimed_at is None

    def test_processing_rows_cannot_be_requeued(self):
        record = _record()
        record.start_processing()

        with pytest.raises(ValidationError):
            record.requeue()


class TestInvalidTransitions:
    def test_pending_cannot_complete(self):
        with pytest.raises(ValidationError) as exc:
            _record().complete()
        assert "Cannot transition from PENDING to COMPLETED" in str(exc.value.messages)

    def test_completed_is_final(self):
        record = _record()
        record.start_processing()
        record.complete()

        for transition in (record.start_processing, record.requeue, lambda: record.fail("late")):
            with pytest.raises(ValidationError):
                transition()
        assert record.status == OutboxStatus.COMPLETED.value

    def test_only_failed_rows_can_be_requeued(self):
        with pytest.raises(ValidationError):
            _record().requeue()

    def test_only_processing_rows_can_be_released(self):
        with pytest.raises(ValidationError):
            _record().release()

    def test_processing_cannot_restart(self):
        record = _record()
        record.start_processing()
        with pytest.raises(ValidationError):
            record.start_processing()
