"""Inventory transaction manager: lock, recheck and commit one allocation.

A quote is computed from a stock snapshot that other transactions may
have moved on from.  The manager turns that quote into an order without
ever overselling:

1. **Start**: open a transaction (a savepoint when the caller already
   holds one), bound how long a row lock may be waited for, and build
   the quote inside it.
2. **Lock & reread**: ``SELECT ... FOR UPDATE`` on exactly the warehouses
   the quote draws from, in ascending id order.  A fixed acquisition order
   across all transactions means two orders over the same warehouses
   cannot deadlock each other.
3. **Recheck**: every locked warehouse must still hold the planned draw.
   If a concurrent commit got there first the attempt fails with
   ``StockChanged``; the allocation is never adjusted in place.
4. **Commit**: conditional decrements plus the Order and OrderItem
   inserts, all in the same transaction.

Any exception inside the block rolls every write back, so a failed
attempt leaves no order, no item and no stock change behind.

SQLite has no row locks.  There the settings run write transactions as
``BEGIN IMMEDIATE`` (whole-database write lock, bounded by the connection
``timeout``) and the conditional decrement is the last line of defence.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Optional

import structlog
from django.conf import settings
from django.db import OperationalError, connection, transaction

from modules.orders.exceptions import LockTimeout, StockChanged

if TYPE_CHECKING:
    from modules.orders.models import Order
    from modules.orders.quotes import Quote
    from modules.orders.repositories.interfaces import IOrderRepository
    from modules.warehouses.repositories.interfaces import IWarehouseRepository

logger = structlog.get_logger(__name__)


class InventoryTransactionManager:
    """Owns the transaction boundary and the lock/recheck/commit sequence."""

    def __init__(
        self,
        warehouse_repository: IWarehouseRepository,
        order_repository: IOrderRepository,
        lock_timeout_ms: Optional[int] = None,
    ) -> None:
        self._warehouse_repo = warehouse_repository
        self._order_repo = order_repository
        self._lock_timeout_ms = (
            lock_timeout_ms
            if lock_timeout_ms is not None
            else settings.INVENTORY_LOCK_TIMEOUT_MS
        )

    def run(
        self,
        plan: Callable[[], Quote],
        idempotency_key: Optional[str] = None,
    ) -> Order:
        """Build a quote with ``plan`` and commit it, in one transaction.

        Whatever ``plan`` raises (``InsufficientStock``,
        ``ShippingCostExceeded``) propagates after the rollback.

        Raises:
            StockChanged: a warehouse lost stock after ``plan`` read it.
            LockTimeout: a lock (row or, on SQLite, database) could not be
                acquired in time.
        """
        try:
            with transaction.atomic():
                previous_wait = self._bound_lock_wait()
                try:
                    quote = plan()
                    return self._lock_recheck_commit(quote, idempotency_key)
                finally:
                    if previous_wait is not None:
                        self._restore_lock_wait(previous_wait)
        except OperationalError as exc:
            if not is_lock_contention(exc):
                raise
            logger.warning("order.lock_timeout", error=str(exc))
            raise LockTimeout(str(exc)) from exc

    def commit(self, quote: Quote, idempotency_key: Optional[str] = None) -> Order:
        """Commit a quote built elsewhere (same guarantees as ``run``)."""
        return self.run(lambda: quote, idempotency_key)

    # ------------------------------------------------------------------
    # Internals (always inside the transaction opened by ``run``)
    # ------------------------------------------------------------------

    def _lock_recheck_commit(self, quote: Quote, idempotency_key: Optional[str]) -> Order:
        draws = quote.draws
        log = logger.bind(quantity=quote.quantity, warehouse_count=len(draws))

        locked = {w.id: w for w in self._warehouse_repo.lock_for_update(draws.keys())}

        for line in quote.lines:
            current = locked.get(line.warehouse_id)
            available = current.stock if current else 0
            if available < line.quantity:
                log.warning(
                    "order.stock_changed",
                    warehouse_id=str(line.warehouse_id),
                    requested=line.quantity,
                    available=available,
                )
                raise StockChanged(
                    warehouse_id=line.warehouse_id,
                    warehouse_name=line.warehouse_name,
                    requested=line.quantity,
                    available=available,
                )

        for warehouse_id in sorted(draws, key=str):
            quantity = draws[warehouse_id]
            if not self._warehouse_repo.decrement_stock(warehouse_id, quantity):
                # Only reachable when the backend cannot lock rows and another
                # writer slipped in between the recheck and the update.
                raise StockChanged(
                    warehouse_id=warehouse_id,
                    warehouse_name=locked[warehouse_id].name,
                    requested=quantity,
                    available=locked[warehouse_id].stock,
                )

        order = self._order_repo.create(
            {
                "quantity": quote.quantity,
                "latitude": quote.latitude,
                "longitude": quote.longitude,
                "total_price": quote.total_price,
                "discount": quote.discount,
                "shipping_cost": quote.shipping_cost,
                "idempotency_key": idempotency_key,
                "items": [
                    {
                        "warehouse_id": line.warehouse_id,
                        "quantity": line.quantity,
                        "shipping_cost": line.shipping_cost,
                    }
                    for line in quote.lines
                ],
            }
        )

        log.info(
            "order.stock_committed",
            order_id=str(order.id),
            draws={str(k): v for k, v in draws.items()},
        )
        return order

    def _bound_lock_wait(self) -> Optional[int]:
        """Cap the row-lock wait for the current transaction.

        MySQL has no transaction-scoped setting, so the session value is
        changed and the previous one returned for ``_restore_lock_wait``.
        SQLite is bounded by the connection ``timeout`` set in settings.
        """
        timeout_ms = int(self._lock_timeout_ms)
        if connection.vendor == "postgresql":
            with connection.cursor() as cursor:
                cursor.execute(f"SET LOCAL lock_timeout = {timeout_ms}")
        elif connection.vendor == "mysql":
            with connection.cursor() as cursor:
                cursor.execute("SELECT @@SESSION.innodb_lock_wait_timeout")
                previous = int(cursor.fetchone()[0])
                cursor.execute(
                    f"SET SESSION innodb_lock_wait_timeout = {max(1, timeout_ms // 1000)}"
                )
            return previous
        return None

    @staticmethod
    def _restore_lock_wait(previous: int) -> None:
        with connection.cursor() as cursor:
            cursor.execute(f"SET SESSION innodb_lock_wait_timeout = {int(previous)}")


# ---------------------------------------------------------------------------
# Lock contention
# ---------------------------------------------------------------------------

# lock_not_available, deadlock_detected
_POSTGRES_LOCK_SQLSTATES = frozenset({"55P03", "40P01"})
# ER_LOCK_WAIT_TIMEOUT, ER_LOCK_DEADLOCK
_MYSQL_LOCK_ERRNOS = frozenset({1205, 1213})
_LOCK_MESSAGES = (
    "database is locked",
    "database table is locked",
    "lock wait timeout",
    "deadlock",
    "could not obtain lock",
    "lock timeout",
)


def is_lock_contention(exc: OperationalError) -> bool:
    """``True`` when ``exc`` is a lock wait timeout or a deadlock victim.

    Django re-raises driver errors with the driver exception as
    ``__cause__``; its error code is preferred over the message.
    """
    driver_error = exc.__cause__ or exc
    sqlstate = getattr(driver_error, "sqlstate", None) or getattr(
        driver_error, "pgcode", None
    )
    if sqlstate in _POSTGRES_LOCK_SQLSTATES:
        return True
    args = getattr(driver_error, "args", ())
    if args and args[0] in _MYSQL_LOCK_ERRNOS:
        return True
    message = str(exc).lower()
    return any(fragment in message for fragment in _LOCK_MESSAGES)
