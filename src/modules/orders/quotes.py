"""Quote: the priced, allocated, validated answer to "what would this order cost?".

``build_quote`` chains allocation -> pricing -> validation over a stock
snapshot and has no side effects; the verify path returns its result as
is, the create path hands it to the inventory transaction manager.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Tuple

from modules.orders.allocation import AllocationLine, allocate
from modules.orders.pricing import price
from modules.orders.validators import is_shipping_cost_acceptable
from modules.warehouses.domain import WarehouseSnapshot


@dataclass(frozen=True)
class Quote:
    quantity: int
    latitude: float
    longitude: float
    base_price: Decimal
    discount_rate: Decimal
    discount: Decimal
    total_price: Decimal
    shipping_cost: Decimal
    exact_shipping_cost: Decimal
    lines: Tuple[AllocationLine, ...]
    is_valid: bool

    @property
    def draws(self) -> dict:
        """Units per warehouse id, as planned by the allocation."""
        return {line.warehouse_id: line.quantity for line in self.lines}


def build_quote(
    quantity: int,
    latitude: float,
    longitude: float,
    candidates: Iterable[WarehouseSnapshot],
) -> Quote:
    """Allocate, price and validate an order against ``candidates``.

    Raises:
        InvalidOrderInput: quantity is not positive.
        InsufficientStock: not enough stock across all candidates.
    """
    lines = allocate(quantity, latitude, longitude, candidates)
    breakdown = price(quantity)
    shipping_cost = sum((line.shipping_cost for line in lines), Decimal("0.00"))
    exact_shipping_cost = sum(
        (line.exact_shipping_cost for line in lines), Decimal("0")
    )

    return Quote(
        quantity=quantity,
        latitude=latitude,
        longitude=longitude,
        base_price=breakdown.base_price,
        discount_rate=breakdown.discount_rate,
        discount=breakdown.discount_amount,
        total_price=breakdown.total_price,
        shipping_cost=shipping_cost,
        exact_shipping_cost=exact_shipping_cost,
        lines=tuple(lines),
        is_valid=is_shipping_cost_acceptable(
            breakdown.total_price, exact_shipping_cost
        ),
    )
