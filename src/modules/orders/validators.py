"""Order validity rule: shipping may cost at most 15% of the discounted total.

The same check runs on both paths.  Verify reports it through
``Quote.is_valid``; create raises before anything is written.
"""

from __future__ import annotations

from decimal import Decimal

from modules.orders.constants import MAX_SHIPPING_RATIO
from modules.orders.exceptions import ShippingCostExceeded


def shipping_cost_limit(total_price: Decimal) -> Decimal:
    return total_price * MAX_SHIPPING_RATIO


def is_shipping_cost_acceptable(total_price: Decimal, shipping_cost: Decimal) -> bool:
    """``True`` when shipping is at or below the cap (equality is valid)."""
    return shipping_cost <= shipping_cost_limit(total_price)


def validate_shipping_cost(total_price: Decimal, shipping_cost: Decimal) -> None:
    """Raise ``ShippingCostExceeded`` if shipping is above the cap."""
    if not is_shipping_cost_acceptable(total_price, shipping_cost):
        raise ShippingCostExceeded(
            shipping_cost=shipping_cost,
            limit=shipping_cost_limit(total_price),
        )
