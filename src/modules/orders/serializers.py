"""Order DRF serializers for API input/output.

The serializer operates at the Interface layer (API Views).
Business logic lives in the Service Layer, which receives
Pydantic DTOs from ``dtos.py``.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.orders.constants import OrderStatus
from modules.orders.models import Order, OrderItem

# ---------------------------------------------------------------------------
# Input Serializers
# ---------------------------------------------------------------------------


class OrderRequestSerializer(serializers.Serializer):
    """Validates quantity + destination (query params for verify, body for create)."""

    quantity = serializers.IntegerField(min_value=1)
    latitude = serializers.FloatField(min_value=-90.0, max_value=90.0)
    longitude = serializers.FloatField(min_value=-180.0, max_value=180.0)


class CreateOrderSerializer(OrderRequestSerializer):
    """Validates the order creation request payload."""


class UpdateOrderStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=OrderStatus.choices)


# ---------------------------------------------------------------------------
# Output Serializers (Read)
# ---------------------------------------------------------------------------


class AllocationLineSerializer(serializers.Serializer):
    """One warehouse's share of a quote."""

    warehouse_id = serializers.UUIDField()
    warehouse_name = serializers.CharField()
    quantity = serializers.IntegerField()
    distance_km = serializers.FloatField()
    shipping_cost = serializers.DecimalField(max_digits=12, decimal_places=2)


class QuoteSerializer(serializers.Serializer):
    """Read serializer for a verify response."""

    quantity = serializers.IntegerField()
    latitude = serializers.FloatField()
    longitude = serializers.FloatField()
    base_price = serializers.DecimalField(max_digits=12, decimal_places=2)
    discount_rate = serializers.DecimalField(max_digits=4, decimal_places=2)
    discount = serializers.DecimalField(max_digits=12, decimal_places=2)
    total_price = serializers.DecimalField(max_digits=12, decimal_places=2)
    shipping_cost = serializers.DecimalField(max_digits=12, decimal_places=2)
    is_valid = serializers.BooleanField()
    items = AllocationLineSerializer(source="lines", many=True)


class OrderItemSerializer(serializers.ModelSerializer):
    """Read serializer for order items with the shipping warehouse."""

    warehouse_name = serializers.CharField(source="warehouse.name", read_only=True)

    class Meta:
        model = OrderItem
        fields = [
            "id",
            "warehouse_id",
            "warehouse_name",
            "quantity",
            "shipping_cost",
        ]
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    """Read serializer for orders with nested items."""

    items = OrderItemSerializer(many=True, read_only=True)
    base_price = serializers.DecimalField(
        max_digits=12, decimal_places=2, read_only=True
    )

    class Meta:
        model = Order
        fields = [
            "id",
            "order_number",
            "quantity",
            "latitude",
            "longitude",
            "base_price",
            "discount",
            "total_price",
            "shipping_cost",
            "status",
            "created_at",
            "updated_at",
            "items",
        ]
        read_only_fields = fields


class OrderListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for order list (no nested relations)."""

    class Meta:
        model = Order
        fields = [
            "id",
            "order_number",
            "quantity",
            "total_price",
            "shipping_cost",
            "status",
            "created_at",
        ]
        read_only_fields = fields
