"""Operation notifications.

Every successfully executed operation publishes exactly one event, named after
whether the operation was a mutation or a query. Subscribers (audit logging,
cache invalidation, ...) register listeners on the dispatcher by event name.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Any, Callable

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field

from .logger_config import ErrorCategory
from .logger_config import log_structured_error

GRAPHQL_QUERY = "graphqlQuery"
GRAPHQL_MUTATION = "graphqlMutation"


class OperationEvent(BaseModel):
    """Payload published after an operation executed."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    name: str | None = Field(default=None, description="Declared operation name, if any")
    schema_key: str
    query: str
    context: dict[str, Any] = Field(default_factory=dict)
    variables: dict[str, Any] = Field(default_factory=dict)
    result: dict[str, Any]
    graphql_schema: Any = Field(default=None, exclude=True)


Listener = Callable[[OperationEvent], Any]


class EventDispatcher:
    """Fire-and-forget publisher for operation events."""

    def __init__(self) -> None:
        self._listeners: dict[str, list[Listener]] = defaultdict(list)

    def subscribe(self, event_name: str, listener: Listener) -> None:
        self._listeners[event_name].append(listener)

    def unsubscribe(self, event_name: str, listener: Listener) -> None:
        listeners = self._listeners.get(event_name)
        if listeners and listener in listeners:
            listeners.remove(listener)

    def listeners(self, event_name: str) -> tuple[Listener, ...]:
        return tuple(self._listeners.get(event_name, ()))

    def trigger(self, event_name: str, event: OperationEvent) -> None:
        """Deliver ``event`` to every listener of ``event_name``.

        Listener failures are logged and never reach the caller.
        """
        for listener in self.listeners(event_name):
            try:
                listener(event)
            except Exception as exc:
                log_structured_error(
                    category=ErrorCategory.ERROR,
                    message=f"Listener for {event_name} failed: {exc}",
                    exception=exc,
                    operation="event_dispatch",
                    event_name=event_name,
                    listener=getattr(listener, "__qualname__", repr(listener)),
                )
