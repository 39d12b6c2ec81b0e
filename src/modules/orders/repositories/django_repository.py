"""Django ORM implementation of the Order repository.

Satisfies ``IOrderRepository`` using Django's QuerySet API.
All write operations are wrapped in ``transaction.atomic()`` so the Order
aggregate (Order + OrderItems) is persisted atomically; when called from
the inventory transaction manager they join its transaction as a
savepoint, so a failed insert rolls the stock decrements back too.

Status overwrites use ``select_for_update()`` (no ``version`` field exists
on the model).
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import QuerySet

from modules.orders.models import Order, OrderItem
from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)


class OrderDjangoRepository(IOrderRepository):
    """Concrete Order repository backed by Django ORM."""

    # ------------------------------------------------------------------
    # Create (aggregate root + children)
    # ------------------------------------------------------------------

    @transaction.atomic
    def create(self, data: Dict[str, Any]) -> Order:
        """Create an order with its items atomically."""
        order = Order(
            quantity=data["quantity"],
            latitude=data["latitude"],
            longitude=data["longitude"],
            total_price=data["total_price"],
            discount=data["discount"],
            shipping_cost=data["shipping_cost"],
            idempotency_key=data.get("idempotency_key"),
        )
        order.save()

        items = data.get("items", [])
        for item_data in items:
            OrderItem.objects.create(
                order=order,
                warehouse_id=item_data["warehouse_id"],
                quantity=item_data["quantity"],
                shipping_cost=item_data["shipping_cost"],
            )

        logger.info(
            "order.persisted",
            order_id=str(order.id),
            order_number=order.order_number,
            item_count=len(items),
        )
        return order

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def queryset(self) -> QuerySet[Order]:
        """Base queryset with items (and their warehouses) eager-loaded."""
        return Order.objects.prefetch_related("items__warehouse")

    def get_by_id(self, id: str) -> Optional[Order]:
        """Retrieve an order with eager-loaded items.

        Returns ``None`` for non-existent or invalid IDs.
        """
        try:
            return self.queryset().filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Order]:
        """List orders (newest first) with optional ORM look-ups.

        Examples of valid filters::

            {"status": "PENDING"}
            {"created_at__date__gte": date(2024, 1, 1)}
        """
        queryset = self.queryset()
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    def get_by_idempotency_key(self, key: str) -> Optional[Order]:
        return self.queryset().filter(idempotency_key=key).first()

    # ------------------------------------------------------------------
    # Update / Save / Delete
    # ------------------------------------------------------------------

    @transaction.atomic
    def update_status(self, id: str, status: str) -> Optional[Tuple[Order, str]]:
        """Overwrite the status on the locked row.

        Returns ``(order, previous_status)``, or ``None`` for non-existent
        or invalid IDs.
        """
        try:
            order = Order.objects.select_for_update().filter(id=id).first()
        except (ValueError, ValidationError):
            return None
        if not order:
            return None

        old_status = order.status
        order.status = status
        order.save(update_fields=["status"])
        logger.info(
            "order.status_persisted",
            order_id=str(id),
            old_status=old_status,
            new_status=status,
        )
        return order, old_status

    @transaction.atomic
    def save(self, entity: Order) -> Order:
        """Persist (create or update) an order."""
        entity.save()
        logger.info("order.saved", order_id=str(entity.id))
        return entity

    @transaction.atomic
    def delete(self, id: str) -> bool:
        """Hard-delete an order; its items go with it (``on_delete=CASCADE``)."""
        order = self.get_by_id(id)
        if not order:
            return False
        order.delete()
        logger.info("order.hard_deleted", order_id=str(id))
        return True
