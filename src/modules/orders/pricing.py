"""Pricing policy: quantity -> base price, discount tier, discounted total.

Pure functions over ``Decimal``.  Totals are compared for exact equality
downstream (the shipping cap, persisted order totals), so binary floats
never enter a money computation.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from modules.orders.constants import CENTS, UNIT_PRICE
from modules.orders.exceptions import InvalidOrderInput

# (minimum quantity, rate), highest threshold first; lower bounds inclusive.
DISCOUNT_TIERS: tuple[tuple[int, Decimal], ...] = (
    (250, Decimal("0.20")),
    (100, Decimal("0.15")),
    (50, Decimal("0.10")),
    (25, Decimal("0.05")),
)

NO_DISCOUNT = Decimal("0.00")


@dataclass(frozen=True)
class PriceBreakdown:
    base_price: Decimal
    discount_rate: Decimal
    discount_amount: Decimal
    total_price: Decimal


def to_cents(amount: Decimal) -> Decimal:
    """Quantize a money amount to cents (half-up)."""
    return amount.quantize(CENTS, rounding=ROUND_HALF_UP)


def discount_rate_for(quantity: int) -> Decimal:
    """Return the discount rate for ``quantity`` (step function, no interpolation)."""
    for threshold, rate in DISCOUNT_TIERS:
        if quantity >= threshold:
            return rate
    return NO_DISCOUNT


def price(quantity: int) -> PriceBreakdown:
    """Price ``quantity`` devices.

    Raises:
        InvalidOrderInput: quantity is not a positive integer.
    """
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
        raise InvalidOrderInput(f"Quantity must be a positive integer, got {quantity!r}.")

    base_price = to_cents(UNIT_PRICE * quantity)
    rate = discount_rate_for(quantity)
    discount_amount = to_cents(base_price * rate)
    return PriceBreakdown(
        base_price=base_price,
        discount_rate=rate,
        discount_amount=discount_amount,
        total_price=base_price - discount_amount,
    )
