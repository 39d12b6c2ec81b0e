"""Warehouse repository interface.

Extends ``IRepository[Warehouse]`` with the stock reads and writes the
order engine needs: an unlocked snapshot of every warehouse holding
stock, a locked re-read of a chosen subset, and a guarded decrement.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Iterable, List, Optional
from uuid import UUID

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.warehouses.domain import WarehouseSnapshot
    from modules.warehouses.models import Warehouse


class IWarehouseRepository(IRepository["Warehouse"]):
    """Repository contract for the Warehouse entity."""

    @abstractmethod
    def list_in_stock(self) -> List[WarehouseSnapshot]:
        """Return snapshots of every warehouse with ``stock > 0``. No locks."""

    @abstractmethod
    def lock_for_update(self, ids: Iterable[UUID]) -> List[WarehouseSnapshot]:
        """Lock the given rows (ascending id) and return fresh snapshots.

        Must be called inside a transaction.  Missing ids are simply absent
        from the result.
        """

    @abstractmethod
    def decrement_stock(self, id: UUID, quantity: int) -> bool:
        """Subtract ``quantity`` only if enough stock remains.

        Returns ``False`` (and writes nothing) when the guard fails.
        """

    @abstractmethod
    def set_stock(self, id: str, stock: int) -> Optional[Warehouse]:
        """Overwrite stock under a row lock (``None`` if missing)."""
