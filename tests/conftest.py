import os
from pathlib import Path

import pytest
from protean.integrations.pytest import DomainFixture


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Select the Protean config overlay before the domain is imported."""
    os.environ["PROTEAN_ENV"] = session.config.option.env


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = str(Path(item.fspath))

        if "/domain/" in test_path:
            item.add_marker(pytest.mark.domain)
        elif "/application/" in test_path:
            item.add_marker(pytest.mark.application)
        elif "/integration/" in test_path or "/bdd/" in test_path:
            item.add_marker(pytest.mark.integration)
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


@pytest.fixture(scope="session")
def orderflow_bed():
    from orderflow.domain import orderflow

    bed = DomainFixture(orderflow)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(orderflow_bed):
    with orderflow_bed.domain_context():
        yield


@pytest.fixture(autouse=True)
def run_around_tests(_ctx):
    """Fixture to automatically cleanup infrastructure after every test"""
    yield

    from protean import current_domain

    for _, provider in current_domain.providers.items():
        provider._data_reset()

    current_domain.event_store.store._data_reset()


@pytest.fixture
def processor():
    from orderflow.bootstrap import build_processor

    return build_processor()


@pytest.fixture
def outbox():
    from orderflow.outbox.store import OutboxStore

    return OutboxStore()


class OutboxLog:
    """Read-side view over the outbox table for assertions."""

    def records(self):
        from orderflow.outbox.record import OutboxRecord
        from protean import current_domain

        return current_domain.repository_for(OutboxRecord)._dao.query.order_by("created_at").all().items

    def of_type(self, event_type):
        return [r for r in self.records() if r.event_type == event_type]

    def types(self):
        return [r.event_type for r in self.records()]

    def pending_types(self):
        return [r.event_type for r in self.records() if r.status == "PENDING"]


@pytest.fixture
def outbox_log():
    return OutboxLog()


@pytest.fixture
def settle(processor):
    """Tick the processor until no PENDING rows remain."""

    def _settle(max_ticks=50):
        for ticks in range(1, max_ticks + 1):
            if processor.tick() == 0:
                return ticks
        raise AssertionError("Outbox did not settle")

    return _settle
