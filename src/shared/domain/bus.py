"""Event bus contracts.

Order services publish through ``IEventBus``; handlers registered at app
start-up implement ``IEventHandler``.  Delivery is in-process.
"""

from __future__ import annotations

from typing import Generic, Protocol, Type, TypeVar

from shared.domain.events import DomainEvent

E = TypeVar("E", bound=DomainEvent, contravariant=True)


class IEventHandler(Protocol, Generic[E]):
    def handle(self, event: E) -> None: ...


class IEventBus(Protocol):
    def subscribe(self, event_class: Type[E], handler: IEventHandler[E]) -> None: ...

    def publish(self, event: DomainEvent) -> None:
        """Deliver ``event`` to its handlers now."""

    def publish_on_commit(self, event: DomainEvent) -> None:
        """Deliver ``event`` once the current transaction commits."""
