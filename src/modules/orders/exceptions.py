"""Order domain exceptions.

Raised by the pricing/allocation engine and the Service Layer.  The API
layer (Views) catches these and translates them into HTTP responses.

Each error keeps the figures that caused it as attributes (shortfall,
limit, offending warehouse) so callers can log or display them without
parsing the message.  ``TransientInventoryError`` marks the concurrency
failures that are safe to retry from scratch.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Optional
from uuid import UUID


class OrderNotFound(Exception):
    """The requested order does not exist."""


class InvalidOrderInput(ValueError):
    """Quantity or coordinates are malformed or out of range."""


class InvalidOrderStatus(Exception):
    """The requested status is not one of ``OrderStatus``."""


class InsufficientStock(Exception):
    """Requested quantity exceeds the stock of every candidate warehouse."""

    def __init__(self, requested: int, available: int) -> None:
        self.requested = requested
        self.available = available
        self.shortfall = requested - available
        super().__init__(
            f"Cannot fulfil order: {self.shortfall} of {requested} units could "
            f"not be allocated (available: {available})."
        )


class ShippingCostExceeded(Exception):
    """Shipping cost is above the allowed share of the discounted total."""

    def __init__(self, shipping_cost: Decimal, limit: Decimal) -> None:
        self.shipping_cost = shipping_cost
        self.limit = limit
        super().__init__(
            f"Order is invalid: shipping cost {shipping_cost} exceeds 15% of the "
            f"discounted total ({limit})."
        )


class TransientInventoryError(Exception):
    """A concurrency failure; retrying the whole create attempt may succeed."""


class StockChanged(TransientInventoryError):
    """A locked warehouse no longer holds the units the allocation planned."""

    def __init__(
        self,
        warehouse_id: UUID,
        requested: int,
        available: int,
        warehouse_name: Optional[str] = None,
    ) -> None:
        self.warehouse_id = warehouse_id
        self.warehouse_name = warehouse_name
        self.requested = requested
        self.available = available
        label = warehouse_name or str(warehouse_id)
        super().__init__(
            f"Stock changed in warehouse {label}: required {requested}, "
            f"available {available}."
        )


class LockTimeout(TransientInventoryError):
    """Waiting for a warehouse row lock exceeded the configured bound."""
