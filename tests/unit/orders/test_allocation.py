from decimal import Decimal
from uuid import UUID

import pytest

from modules.orders.allocation import (
    allocate,
    exact_line_shipping_cost,
    line_shipping_cost,
    rank_by_distance,
)
from modules.orders.exceptions import InsufficientStock, InvalidOrderInput
from modules.warehouses.domain import WarehouseSnapshot

pytestmark = pytest.mark.unit


def _snapshot(n, name, latitude, longitude, stock):
    return WarehouseSnapshot(
        id=UUID(int=n), name=name, latitude=latitude, longitude=longitude, stock=stock
    )


@pytest.fixture()
def candidates():
    return [
        _snapshot(3, "Far", 0.0, 1.0, 10),
        _snapshot(1, "Near", 0.0, 0.0, 5),
        _snapshot(2, "Empty", 0.0, 0.5, 0),
    ]


class TestLineShippingCost:
    def test_zero_distance_is_free(self):
        assert line_shipping_cost(100, 0.0) == Decimal("0.00")

    def test_rate_times_weight_times_distance(self):
        # 0.01 * 3 * 0.365 * 111.19 km = 1.2176
        assert line_shipping_cost(3, 111.19492664455873) == Decimal("1.22")

    def test_linear_in_quantity_before_rounding(self):
        assert line_shipping_cost(100, 1000.0) == Decimal("365.00")
        assert line_shipping_cost(200, 1000.0) == Decimal("730.00")

    def test_exact_cost_is_not_rounded(self):
        assert exact_line_shipping_cost(3, 111.19492664455873) == (
            Decimal("0.01") * 3 * Decimal("0.365") * Decimal("111.19492664455873")
        )
        assert line_shipping_cost(3, 111.19492664455873) == Decimal("1.22")


class TestRankByDistance:
    def test_nearest_first_and_skips_empty(self, candidates):
        ranked = rank_by_distance(0.0, 0.0, candidates)
        assert [w.name for _, w in ranked] == ["Near", "Far"]

    def test_ties_broken_by_id(self):
        a = _snapshot(2, "B", 10.0, 10.0, 1)
        b = _snapshot(1, "A", 10.0, 10.0, 1)
        ranked = rank_by_distance(0.0, 0.0, [a, b])
        assert [w.name for _, w in ranked] == ["A", "B"]


class TestAllocate:
    def test_nearest_warehouse_drained_first(self, candidates):
        lines = allocate(8, 0.0, 0.0, candidates)
        assert [(line.warehouse_name, line.quantity) for line in lines] == [
            ("Near", 5),
            ("Far", 3),
        ]
        assert lines[0].shipping_cost == Decimal("0.00")
        assert lines[1].shipping_cost == Decimal("1.22")

    def test_single_warehouse_when_it_suffices(self, candidates):
        lines = allocate(4, 0.0, 0.0, candidates)
        assert len(lines) == 1
        assert lines[0].warehouse_id == UUID(int=1)
        assert lines[0].quantity == 4

    def test_exactly_all_stock(self, candidates):
        lines = allocate(15, 0.0, 0.0, candidates)
        assert sum(line.quantity for line in lines) == 15

    def test_quantities_conserved_and_within_stock(self, candidates):
        stock = {w.id: w.stock for w in candidates}
        for quantity in range(1, 16):
            lines = allocate(quantity, 0.0, 0.7, candidates)
            assert sum(line.quantity for line in lines) == quantity
            assert all(0 < line.quantity <= stock[line.warehouse_id] for line in lines)
            distances = [line.distance_km for line in lines]
            assert distances == sorted(distances)

    def test_independent_of_candidate_order(self, candidates):
        forward = allocate(9, 0.0, 0.3, candidates)
        backward = allocate(9, 0.0, 0.3, list(reversed(candidates)))
        assert forward == backward

    def test_tie_breaks_by_id(self):
        twins = [
            _snapshot(2, "Second", 5.0, 5.0, 3),
            _snapshot(1, "First", 5.0, 5.0, 3),
        ]
        lines = allocate(4, 0.0, 0.0, twins)
        assert [(line.warehouse_name, line.quantity) for line in lines] == [
            ("First", 3),
            ("Second", 1),
        ]

    def test_insufficient_stock_reports_shortfall(self, candidates):
        with pytest.raises(InsufficientStock) as exc_info:
            allocate(16, 0.0, 0.0, candidates)
        assert exc_info.value.requested == 16
        assert exc_info.value.available == 15
        assert exc_info.value.shortfall == 1

    def test_no_candidates_is_insufficient(self):
        with pytest.raises(InsufficientStock) as exc_info:
            allocate(1, 0.0, 0.0, [])
        assert exc_info.value.available == 0

    @pytest.mark.parametrize("quantity", [0, -5])
    def test_rejects_non_positive_quantity(self, candidates, quantity):
        with pytest.raises(InvalidOrderInput):
            allocate(quantity, 0.0, 0.0, candidates)
