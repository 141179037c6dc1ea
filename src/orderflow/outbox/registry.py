"""Event handler registry: event type name → handlers, in registration order."""

from collections import defaultdict

import structlog
from protean.exceptions import ConfigurationError

logger = structlog.get_logger(__name__)


class EventHandlerRegistry:
    """Built once at startup, sealed, then only read.

    Unknown event types resolve to an empty tuple. Registering after
    ``seal()`` is a configuration error.
    """

    def __init__(self):
        self._handlers = defaultdict(list)
        self._sealed = False

    def register(self, event_type: str, handler) -> None:
        if self._sealed:
            raise ConfigurationError(f"Cannot register {type(handler).__name__} for {event_type}: registry is sealed")
        if not callable(getattr(handler, "handle", None)):
            raise ConfigurationError(f"{type(handler).__name__} has no handle() method")

        self._handlers[event_type].append(handler)
        logger.debug("Handler registered", event_type=event_type, handler=type(handler).__name__)

    def handlers_for(self, event_type: str) -> tuple:
        return tuple(self._handlers.get(event_type, ()))

    def event_types(self) -> list[str]:
        return list(self._handlers)

    def seal(self) -> "EventHandlerRegistry":
        self._sealed = True
        return self

    @property
    def sealed(self) -> bool:
        return self._sealed
