import pytest
from pydantic import ValidationError

from modules.orders.dtos import CreateOrderDTO, OrderRequestDTO
from modules.warehouses.dtos import UpdateWarehouseStockDTO

pytestmark = pytest.mark.unit


class TestOrderRequestDTO:
    def test_valid(self):
        dto = OrderRequestDTO(quantity=10, latitude=-23.4, longitude=-46.5)
        assert dto.quantity == 10

    def test_frozen(self):
        dto = OrderRequestDTO(quantity=10, latitude=0.0, longitude=0.0)
        with pytest.raises(ValidationError):
            dto.quantity = 11

    @pytest.mark.parametrize(
        "field, value",
        [
            ("quantity", 0),
            ("quantity", -3),
            ("latitude", 90.5),
            ("latitude", float("nan")),
            ("longitude", -180.1),
            ("longitude", float("nan")),
        ],
    )
    def test_rejects_out_of_range(self, field, value):
        data = {"quantity": 1, "latitude": 0.0, "longitude": 0.0, field: value}
        with pytest.raises(ValidationError):
            OrderRequestDTO(**data)

    def test_boundaries_accepted(self):
        OrderRequestDTO(quantity=1, latitude=90.0, longitude=-180.0)
        OrderRequestDTO(quantity=1, latitude=-90.0, longitude=180.0)


class TestCreateOrderDTO:
    def test_idempotency_key_optional(self):
        assert CreateOrderDTO(quantity=1, latitude=0, longitude=0).idempotency_key is None

    def test_idempotency_key_kept(self):
        dto = CreateOrderDTO(quantity=1, latitude=0, longitude=0, idempotency_key="k-1")
        assert dto.idempotency_key == "k-1"


class TestUpdateWarehouseStockDTO:
    def test_zero_allowed(self):
        assert UpdateWarehouseStockDTO(stock=0).stock == 0

    def test_negative_rejected(self):
        with pytest.raises(ValidationError):
            UpdateWarehouseStockDTO(stock=-1)
