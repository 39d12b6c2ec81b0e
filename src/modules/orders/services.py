"""Order service layer (Use Cases).

Orchestrates quoting, order creation, status overwrites and deletion.

Business rules enforced:
- Verify is read-only: it never takes locks and never writes.
- Create re-runs allocation and pricing inside the inventory transaction,
  so the committed order is priced against the stock it actually draws.
- Shipping above 15% of the discounted total blocks creation.
- Concurrency failures (``StockChanged``, ``LockTimeout``) restart the
  whole attempt with a fresh allocation, a bounded number of times.
- Deleting an order does not give its units back to the warehouses.
"""

from __future__ import annotations

import random
import time
from typing import TYPE_CHECKING, Any, Dict, List, Optional

import structlog
from django.conf import settings
from django.db import IntegrityError

from modules.orders.constants import OrderStatus
from modules.orders.events import OrderCreated, OrderDeleted, OrderStatusChanged
from modules.orders.exceptions import (
    InvalidOrderStatus,
    OrderNotFound,
    TransientInventoryError,
)
from modules.orders.inventory import InventoryTransactionManager
from modules.orders.quotes import Quote, build_quote
from modules.orders.validators import validate_shipping_cost
from shared.infrastructure.bus import event_bus

if TYPE_CHECKING:
    from modules.orders.dtos import CreateOrderDTO, OrderRequestDTO
    from modules.orders.models import Order
    from modules.orders.repositories.interfaces import IOrderRepository
    from modules.warehouses.repositories.interfaces import IWarehouseRepository

logger = structlog.get_logger(__name__)


class OrderService:
    """Application service for Order use-cases.

    Receives repositories via constructor injection (DIP).  The inventory
    manager defaults to one built over the same repositories.
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        warehouse_repository: IWarehouseRepository,
        inventory_manager: Optional[InventoryTransactionManager] = None,
    ) -> None:
        self._order_repo = order_repository
        self._warehouse_repo = warehouse_repository
        self._inventory = inventory_manager or InventoryTransactionManager(
            warehouse_repository=warehouse_repository,
            order_repository=order_repository,
        )

    # ------------------------------------------------------------------
    # Quotes
    # ------------------------------------------------------------------

    def verify_order(self, dto: OrderRequestDTO) -> Quote:
        """Quote an order against current stock without reserving anything.

        An order whose shipping is too expensive still gets a quote, with
        ``is_valid=False``.

        Raises:
            InvalidOrderInput: quantity is not a positive integer.
            InsufficientStock: total stock cannot cover the quantity.
        """
        quote = self._quote(dto)
        logger.info(
            "order.verified",
            quantity=dto.quantity,
            total_price=str(quote.total_price),
            shipping_cost=str(quote.shipping_cost),
            is_valid=quote.is_valid,
            warehouse_count=len(quote.lines),
        )
        return quote

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def find_by_idempotency_key(self, key: Optional[str]) -> Optional[Order]:
        if not key:
            return None
        return self._order_repo.get_by_idempotency_key(key)

    def create_order(self, dto: CreateOrderDTO) -> Order:
        """Allocate, price, validate and commit an order.

        Steps (each attempt, in one transaction):
        1. Snapshot stocked warehouses and allocate nearest-first.
        2. Price the order and reject it if shipping exceeds the cap.
        3. Lock the drawn warehouses, recheck and decrement their stock,
           persist the order and its items.

        Raises:
            InvalidOrderInput: quantity is not a positive integer.
            InsufficientStock: total stock cannot cover the quantity.
            ShippingCostExceeded: shipping is above 15% of the total.
            StockChanged, LockTimeout: still failing after the last retry.
        """
        log = logger.bind(
            quantity=dto.quantity,
            latitude=dto.latitude,
            longitude=dto.longitude,
        )
        log.info("order.creation_started")

        existing = self.find_by_idempotency_key(dto.idempotency_key)
        if existing:
            log.info(
                "order.idempotency_hit",
                order_id=str(existing.id),
                key=dto.idempotency_key,
            )
            return existing

        def plan() -> Quote:
            quote = self._quote(dto)
            validate_shipping_cost(quote.total_price, quote.exact_shipping_cost)
            return quote

        max_attempts = max(1, int(settings.ORDER_CREATE_MAX_ATTEMPTS))
        attempt = 1
        while True:
            try:
                order = self._inventory.run(plan, idempotency_key=dto.idempotency_key)
                break
            except TransientInventoryError as exc:
                if attempt >= max_attempts:
                    log.error(
                        "order.creation_gave_up",
                        attempts=attempt,
                        error=str(exc),
                    )
                    raise
                log.warning(
                    "order.creation_retry",
                    attempt=attempt,
                    error_type=type(exc).__name__,
                    error=str(exc),
                )
                self._backoff(attempt)
                attempt += 1
            except IntegrityError:
                # A concurrent request with the same key committed first.
                existing = self.find_by_idempotency_key(dto.idempotency_key)
                if not existing:
                    raise
                log.info(
                    "order.idempotency_hit",
                    order_id=str(existing.id),
                    key=dto.idempotency_key,
                )
                return existing

        log.info(
            "order.created",
            order_id=str(order.id),
            order_number=order.order_number,
            total_price=str(order.total_price),
            shipping_cost=str(order.shipping_cost),
            attempts=attempt,
        )

        # Re-fetch with prefetch for output
        order_with_relations = self._order_repo.get_by_id(str(order.id)) or order
        event_bus.publish_on_commit(
            OrderCreated(
                aggregate_id=order.id,
                order_number=order.order_number,
                quantity=order.quantity,
                warehouse_count=len(order_with_relations.items.all()),
            )
        )
        return order_with_relations

    def update_status(self, order_id: str, new_status: str) -> Order:
        """Overwrite an order's status with any known value.

        Raises:
            InvalidOrderStatus: ``new_status`` is not an ``OrderStatus``.
            OrderNotFound: order does not exist.
        """
        if new_status not in OrderStatus.values:
            raise InvalidOrderStatus(
                f"Unknown status {new_status!r}; expected one of "
                f"{', '.join(OrderStatus.values)}."
            )

        result = self._order_repo.update_status(str(order_id), new_status)
        if not result:
            raise OrderNotFound(f"Order {order_id} not found.")
        order, old_status = result

        logger.info(
            "order.status_updated",
            order_id=str(order_id),
            old_status=old_status,
            new_status=new_status,
        )
        event_bus.publish_on_commit(
            OrderStatusChanged(
                aggregate_id=order.id,
                old_status=old_status,
                new_status=new_status,
            )
        )
        return self._order_repo.get_by_id(str(order_id)) or order

    def delete_order(self, order_id: str) -> None:
        """Delete an order and its items.  Warehouse stock is left as is.

        Raises:
            OrderNotFound: order does not exist.
        """
        order = self._order_repo.get_by_id(str(order_id))
        if not order or not self._order_repo.delete(str(order_id)):
            raise OrderNotFound(f"Order {order_id} not found.")

        logger.info(
            "order.deleted",
            order_id=str(order_id),
            order_number=order.order_number,
            quantity=order.quantity,
            restocked=False,
        )
        event_bus.publish_on_commit(
            OrderDeleted(
                aggregate_id=order.id,
                order_number=order.order_number,
                quantity=order.quantity,
            )
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_order(self, order_id: str) -> Order:
        """Retrieve a single order by ID.

        Raises:
            OrderNotFound: if the order does not exist.
        """
        order = self._order_repo.get_by_id(order_id)
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")
        return order

    def list_orders(self, filters: Optional[Dict[str, Any]] = None) -> List[Order]:
        """Return a list of orders, optionally filtered."""
        return self._order_repo.list(filters)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _quote(self, dto: OrderRequestDTO) -> Quote:
        return build_quote(
            dto.quantity,
            dto.latitude,
            dto.longitude,
            self._warehouse_repo.list_in_stock(),
        )

    @staticmethod
    def _backoff(attempt: int) -> None:
        base_ms = float(settings.ORDER_CREATE_RETRY_BACKOFF_MS)
        if base_ms <= 0:
            return
        time.sleep(base_ms * attempt * random.uniform(0.5, 1.5) / 1000.0)
