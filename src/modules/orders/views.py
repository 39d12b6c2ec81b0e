"""Order API views.

Exposes the ``OrderService`` via HTTP using DRF ViewSets.
Domain exceptions are caught and translated into appropriate
HTTP status codes; the view never swallows generic exceptions.
"""

from __future__ import annotations

from typing import Type

from django_filters.rest_framework import DjangoFilterBackend
from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.filters import OrderingFilter
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.core.pagination import StandardResultsSetPagination
from modules.orders.dtos import CreateOrderDTO, OrderRequestDTO
from modules.orders.exceptions import (
    InsufficientStock,
    InvalidOrderInput,
    InvalidOrderStatus,
    OrderNotFound,
    ShippingCostExceeded,
    TransientInventoryError,
)
from modules.orders.filters import OrderFilter
from modules.orders.models import Order
from modules.orders.pricing import to_cents
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.serializers import (
    CreateOrderSerializer,
    OrderListSerializer,
    OrderRequestSerializer,
    OrderSerializer,
    QuoteSerializer,
    UpdateOrderStatusSerializer,
)
from modules.orders.services import OrderService
from modules.warehouses.repositories.django_repository import (
    WarehouseDjangoRepository,
)


class OrderViewSet(GenericViewSet):
    """ViewSet for Order operations.

    Uses ``OrderService`` with injected repositories (DIP).
    Does **not** extend ``ModelViewSet``; all ORM access goes through
    the service/repository layer.
    """

    queryset = Order.objects.all()
    serializer_class = OrderSerializer
    filterset_class = OrderFilter
    ordering_fields = ["created_at", "total_price", "quantity", "status"]
    ordering = ["-created_at", "-id"]
    filter_backends = [DjangoFilterBackend, OrderingFilter]

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._repository = OrderDjangoRepository()
        self._service = OrderService(
            order_repository=self._repository,
            warehouse_repository=WarehouseDjangoRepository(),
        )

    def get_queryset(self):
        return self._repository.queryset()

    # ------------------------------------------------------------------
    # Verify (quote only)
    # ------------------------------------------------------------------

    @action(detail=False, methods=["get"], serializer_class=QuoteSerializer)
    def verify(self, request: Request) -> Response:
        """GET /api/v1/orders/verify/?quantity=&latitude=&longitude=

        Prices and allocates without reserving stock.  An order with
        excessive shipping still returns 200 with ``is_valid: false``.
        """
        request_serializer = OrderRequestSerializer(data=request.query_params)
        request_serializer.is_valid(raise_exception=True)

        try:
            dto = _build_dto(OrderRequestDTO, request_serializer.validated_data)
            quote = self._service.verify_order(dto)
        except PydanticValidationError as exc:
            return _invalid_input(exc)
        except InvalidOrderInput as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        except InsufficientStock as exc:
            return _insufficient_stock(exc)

        return Response(QuoteSerializer(quote).data)

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/v1/orders/

        Supports idempotency via the ``Idempotency-Key`` header.
        Returns 200 if the key was already used, 201 for new orders.
        """
        create_serializer = CreateOrderSerializer(data=request.data)
        create_serializer.is_valid(raise_exception=True)

        idempotency_key = request.headers.get("Idempotency-Key") or None
        existing = self._service.find_by_idempotency_key(idempotency_key)
        if existing:
            return Response(OrderSerializer(existing).data, status=status.HTTP_200_OK)

        try:
            dto = _build_dto(
                CreateOrderDTO,
                create_serializer.validated_data,
                idempotency_key=idempotency_key,
            )
            order = self._service.create_order(dto)
        except PydanticValidationError as exc:
            return _invalid_input(exc)
        except InvalidOrderInput as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        except InsufficientStock as exc:
            return _insufficient_stock(exc)
        except ShippingCostExceeded as exc:
            return Response(
                {
                    "detail": str(exc),
                    "shipping_cost": str(to_cents(exc.shipping_cost)),
                    "limit": str(to_cents(exc.limit)),
                },
                status=status.HTTP_422_UNPROCESSABLE_ENTITY,
            )
        except TransientInventoryError as exc:
            return Response(
                {"detail": f"Inventory is busy, please retry. ({exc})"},
                status=status.HTTP_503_SERVICE_UNAVAILABLE,
            )

        return Response(OrderSerializer(order).data, status=status.HTTP_201_CREATED)

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    def list(self, request: Request) -> Response:
        """GET /api/v1/orders/

        Filtering (status, date range) is handled by ``OrderFilter`` via
        ``filter_backends``.  Ordering is handled by ``OrderingFilter``.
        Results are paginated.
        """
        queryset = self.filter_queryset(self.get_queryset())

        paginator = StandardResultsSetPagination()
        page = paginator.paginate_queryset(queryset, request)
        serializer = OrderListSerializer(page, many=True)
        return paginator.get_paginated_response(serializer.data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/orders/{pk}/"""
        try:
            order = self._service.get_order(pk)
        except OrderNotFound:
            return _order_not_found()
        return Response(OrderSerializer(order).data)

    # ------------------------------------------------------------------
    # Status / Delete
    # ------------------------------------------------------------------

    @action(
        detail=True,
        methods=["patch"],
        url_path="status",
        serializer_class=UpdateOrderStatusSerializer,
    )
    def update_status(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/orders/{pk}/status/

        Overwrites the status with any known value; there is no
        transition graph.
        """
        status_serializer = UpdateOrderStatusSerializer(data=request.data)
        status_serializer.is_valid(raise_exception=True)

        try:
            order = self._service.update_status(
                order_id=pk,
                new_status=status_serializer.validated_data["status"],
            )
        except OrderNotFound:
            return _order_not_found()
        except InvalidOrderStatus as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(OrderSerializer(order).data)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/orders/{pk}/

        Removes the order and its items.  Stock is not returned.
        """
        try:
            self._service.delete_order(pk)
        except OrderNotFound:
            return _order_not_found()
        return Response(status=status.HTTP_204_NO_CONTENT)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _build_dto(dto_class: Type[OrderRequestDTO], data: dict, **extra) -> OrderRequestDTO:
    return dto_class(
        quantity=data["quantity"],
        latitude=data["latitude"],
        longitude=data["longitude"],
        **extra,
    )


def _invalid_input(exc: PydanticValidationError) -> Response:
    errors = [error["msg"] for error in exc.errors()]
    return Response({"detail": errors}, status=status.HTTP_400_BAD_REQUEST)


def _insufficient_stock(exc: InsufficientStock) -> Response:
    return Response(
        {
            "detail": str(exc),
            "requested": exc.requested,
            "available": exc.available,
            "shortfall": exc.shortfall,
        },
        status=status.HTTP_409_CONFLICT,
    )


def _order_not_found() -> Response:
    return Response(
        {"detail": "Order not found."},
        status=status.HTTP_404_NOT_FOUND,
    )
