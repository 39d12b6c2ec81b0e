"""Warehouse API views.

Read-only listing plus the stock overwrite endpoint.  Creation and
deletion of warehouses are out of scope for this service; the seed
command provisions them.
"""

from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.warehouses.dtos import UpdateWarehouseStockDTO
from modules.warehouses.exceptions import WarehouseNotFound
from modules.warehouses.models import Warehouse
from modules.warehouses.repositories.django_repository import (
    WarehouseDjangoRepository,
)
from modules.warehouses.serializers import (
    UpdateWarehouseStockSerializer,
    WarehouseSerializer,
)
from modules.warehouses.services import WarehouseService


class WarehouseViewSet(GenericViewSet):
    """ViewSet for warehouse reads and stock updates."""

    queryset = Warehouse.objects.all()
    serializer_class = WarehouseSerializer
    pagination_class = None

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = WarehouseService(repository=WarehouseDjangoRepository())

    def list(self, request: Request) -> Response:
        """GET /api/v1/warehouses/"""
        warehouses = self._service.list_warehouses()
        return Response(WarehouseSerializer(warehouses, many=True).data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/warehouses/{pk}/"""
        try:
            warehouse = self._service.get_warehouse(pk)
        except WarehouseNotFound:
            return Response(
                {"detail": "Warehouse not found."},
                status=status.HTTP_404_NOT_FOUND,
            )
        return Response(WarehouseSerializer(warehouse).data)

    @action(detail=True, methods=["put"], serializer_class=UpdateWarehouseStockSerializer)
    def stock(self, request: Request, pk: str | None = None) -> Response:
        """PUT /api/v1/warehouses/{pk}/stock/"""
        serializer = UpdateWarehouseStockSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        dto = UpdateWarehouseStockDTO(stock=serializer.validated_data["stock"])

        try:
            warehouse = self._service.update_stock(pk, dto)
        except WarehouseNotFound:
            return Response(
                {"detail": "Warehouse not found."},
                status=status.HTTP_404_NOT_FOUND,
            )
        return Response(WarehouseSerializer(warehouse).data)
