from decimal import Decimal

import pytest

from modules.orders.exceptions import InvalidOrderInput
from modules.orders.pricing import discount_rate_for, price, to_cents

pytestmark = pytest.mark.unit


class TestDiscountTiers:
    @pytest.mark.parametrize(
        "quantity, rate",
        [
            (1, "0.00"),
            (24, "0.00"),
            (25, "0.05"),
            (49, "0.05"),
            (50, "0.10"),
            (99, "0.10"),
            (100, "0.15"),
            (249, "0.15"),
            (250, "0.20"),
            (10_000, "0.20"),
        ],
    )
    def test_tier_boundaries(self, quantity, rate):
        assert discount_rate_for(quantity) == Decimal(rate)


class TestPrice:
    def test_no_discount(self):
        breakdown = price(10)
        assert breakdown.base_price == Decimal("1500.00")
        assert breakdown.discount_rate == Decimal("0.00")
        assert breakdown.discount_amount == Decimal("0.00")
        assert breakdown.total_price == Decimal("1500.00")

    def test_ten_percent_tier(self):
        breakdown = price(50)
        assert breakdown.base_price == Decimal("7500.00")
        assert breakdown.discount_amount == Decimal("750.00")
        assert breakdown.total_price == Decimal("6750.00")

    def test_five_percent_tier(self):
        breakdown = price(25)
        assert breakdown.discount_amount == Decimal("187.50")
        assert breakdown.total_price == Decimal("3562.50")

    def test_top_tier(self):
        breakdown = price(250)
        assert breakdown.base_price == Decimal("37500.00")
        assert breakdown.total_price == Decimal("30000.00")

    def test_total_is_base_minus_discount(self):
        for quantity in (1, 24, 25, 99, 100, 249, 250, 1234):
            breakdown = price(quantity)
            assert (
                breakdown.total_price
                == breakdown.base_price - breakdown.discount_amount
            )

    def test_amounts_are_in_cents(self):
        breakdown = price(37)
        for amount in (
            breakdown.base_price,
            breakdown.discount_amount,
            breakdown.total_price,
        ):
            assert amount.as_tuple().exponent == -2

    @pytest.mark.parametrize("quantity", [0, -1, 1.5, "10", True, None])
    def test_rejects_non_positive_or_non_integer(self, quantity):
        with pytest.raises(InvalidOrderInput):
            price(quantity)


def test_to_cents_rounds_half_up():
    assert to_cents(Decimal("1.005")) == Decimal("1.01")
    assert to_cents(Decimal("1.004")) == Decimal("1.00")
