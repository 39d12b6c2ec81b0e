"""Order repository interface.

Extends ``IRepository[Order]`` with the methods the Order aggregate
needs: atomic creation with items, status overwrite under a row lock,
hard delete, and idempotency-key look-up.

The Service Layer and the inventory transaction manager depend
exclusively on this contract (DIP).
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Tuple

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.orders.models import Order


class IOrderRepository(IRepository["Order"]):
    """Repository contract for the Order aggregate root.

    The Order aggregate includes its OrderItem children.  Mutations must
    be atomic.
    """

    @abstractmethod
    def create(self, data: Dict[str, Any]) -> Order:
        """Create an order with its items atomically.

        ``data`` must include ``quantity``, ``latitude``, ``longitude``,
        ``total_price``, ``discount``, ``shipping_cost`` and ``items`` (list
        of dicts with ``warehouse_id``, ``quantity``, ``shipping_cost``);
        ``idempotency_key`` is optional.
        """

    @abstractmethod
    def get_by_id(self, id: str) -> Optional[Order]:
        """Retrieve an order with prefetched items."""

    @abstractmethod
    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Order]:
        """List orders with optional filters."""

    @abstractmethod
    def update_status(self, id: str, status: str) -> Optional[Tuple[Order, str]]:
        """Overwrite the status under a row lock.

        Returns the order and its previous status, or ``None`` if missing.
        """

    @abstractmethod
    def delete(self, id: str) -> bool:
        """Hard-delete an order and its items; ``False`` if missing."""

    @abstractmethod
    def get_by_idempotency_key(self, key: str) -> Optional[Order]:
        """Retrieve an order by its idempotency key."""
