from decimal import Decimal
from uuid import UUID

import pytest

from modules.orders.exceptions import InsufficientStock
from modules.orders.quotes import build_quote
from modules.warehouses.domain import WarehouseSnapshot

pytestmark = pytest.mark.unit

NEAR = WarehouseSnapshot(id=UUID(int=1), name="Near", latitude=0.0, longitude=0.0, stock=5)
FAR = WarehouseSnapshot(id=UUID(int=2), name="Far", latitude=0.0, longitude=1.0, stock=10)


class TestBuildQuote:
    def test_split_order(self):
        quote = build_quote(8, 0.0, 0.0, [NEAR, FAR])
        assert quote.base_price == Decimal("1200.00")
        assert quote.discount == Decimal("0.00")
        assert quote.total_price == Decimal("1200.00")
        assert quote.shipping_cost == Decimal("1.22")
        assert quote.is_valid is True
        assert quote.draws == {NEAR.id: 5, FAR.id: 3}

    def test_shipping_is_sum_of_lines(self):
        quote = build_quote(12, 0.0, 0.4, [NEAR, FAR])
        assert quote.shipping_cost == sum(line.shipping_cost for line in quote.lines)

    def test_too_expensive_to_ship_is_reported_not_raised(self):
        # A quarter of the way round the globe: about 10,008 km.
        quote = build_quote(1, 0.0, 90.0, [NEAR])
        assert quote.shipping_cost == Decimal("36.53")
        assert quote.total_price == Decimal("150.00")
        assert quote.is_valid is False

    def test_deterministic(self):
        assert build_quote(7, 0.0, 0.2, [NEAR, FAR]) == build_quote(
            7, 0.0, 0.2, [FAR, NEAR]
        )

    def test_insufficient_stock_raises(self):
        with pytest.raises(InsufficientStock):
            build_quote(100, 0.0, 0.0, [NEAR, FAR])

    def test_cap_checked_before_rounding(self):
        # 6165 km from a single unit: exactly 22.50225, which rounds to the
        # 22.50 cap but is still above it.
        quote = build_quote(1, 0.0, 55.44317700488974, [NEAR])
        assert quote.total_price == Decimal("150.00")
        assert quote.shipping_cost == Decimal("22.50")
        assert quote.exact_shipping_cost > Decimal("22.50")
        assert quote.is_valid is False

    def test_exact_shipping_is_sum_of_unrounded_lines(self):
        quote = build_quote(8, 0.0, 0.0, [NEAR, FAR])
        assert quote.exact_shipping_cost == sum(
            line.exact_shipping_cost for line in quote.lines
        )
        assert quote.exact_shipping_cost != quote.shipping_cost
