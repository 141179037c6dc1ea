"""Helpers around an aggregate's buffer of not-yet-published events.

Aggregates record events with ``raise_``; the buffer is Protean's ``_events``
list. Draining is the only way events leave the aggregate.
"""


def drain_events(aggregate) -> list:
    """Return buffered events in insertion order and empty the buffer."""
    events = list(aggregate._events)
    aggregate._events.clear()
    return events


def restore_events(aggregate, events) -> None:
    """Put drained events back in front of anything recorded since."""
    aggregate._events[:0] = events


def reconstituted(aggregate):
    """Hand out a loaded aggregate with an empty buffer.

    Loading must never re-announce historical events, whatever the loading
    path may have recorded along the way.
    """
    if aggregate is not None:
        drain_events(aggregate)
    return aggregate
