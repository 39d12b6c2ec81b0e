"""Warehouse DRF serializers for API input/output."""

from __future__ import annotations

from rest_framework import serializers

from modules.warehouses.models import Warehouse


class UpdateWarehouseStockSerializer(serializers.Serializer):
    """Validates a stock overwrite payload."""

    stock = serializers.IntegerField(min_value=0)


class WarehouseSerializer(serializers.ModelSerializer):
    class Meta:
        model = Warehouse
        fields = [
            "id",
            "name",
            "latitude",
            "longitude",
            "stock",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
