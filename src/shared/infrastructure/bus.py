"""In-memory event bus implementation."""

from __future__ import annotations

from typing import Dict, List, Type

from django.db import transaction

from shared.domain.bus import IEventBus, IEventHandler
from shared.domain.events import DomainEvent


class InMemoryEventBus(IEventBus):
    """Simple in-process event bus.

    ``publish_on_commit`` defers delivery until the surrounding database
    transaction commits, so handlers never see events for work that was
    rolled back.  Outside a transaction it delivers immediately.
    """

    def __init__(self) -> None:
        self._handlers: Dict[Type[DomainEvent], List[IEventHandler]] = {}

    def subscribe(self, event_class: Type[DomainEvent], handler: IEventHandler) -> None:
        handlers = self._handlers.setdefault(event_class, [])
        if handler not in handlers:
            handlers.append(handler)

    def publish(self, event: DomainEvent) -> None:
        for handler in self._handlers.get(type(event), []):
            handler.handle(event)

    def publish_on_commit(self, event: DomainEvent) -> None:
        transaction.on_commit(lambda: self.publish(event))


# Global bus instance (singleton)

event_bus = InMemoryEventBus()
