"""Domain events for the Orders bounded context."""

from __future__ import annotations

from dataclasses import dataclass

from shared.domain.events import DomainEvent


@dataclass(frozen=True, kw_only=True)
class OrderCreated(DomainEvent):
    """Raised when an allocation is committed as an order."""

    order_number: str
    quantity: int
    warehouse_count: int


@dataclass(frozen=True, kw_only=True)
class OrderStatusChanged(DomainEvent):
    """Raised when an order status is overwritten."""

    old_status: str
    new_status: str


@dataclass(frozen=True, kw_only=True)
class OrderDeleted(DomainEvent):
    """Raised when an order is deleted.  Stock is never given back."""

    order_number: str
    quantity: int
    restocked: bool = False
