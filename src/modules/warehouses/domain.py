"""Immutable warehouse value objects handed to the order engine."""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True)
class WarehouseSnapshot:
    """Point-in-time copy of a warehouse row.

    The allocator and the inventory transaction manager only ever see
    snapshots, never live model instances, so no code outside the
    repository can observe or mutate a half-updated warehouse.
    """

    id: UUID
    name: str
    latitude: float
    longitude: float
    stock: int

    @classmethod
    def from_entity(cls, warehouse) -> WarehouseSnapshot:
        return cls(
            id=warehouse.id,
            name=warehouse.name,
            latitude=warehouse.latitude,
            longitude=warehouse.longitude,
            stock=warehouse.stock,
        )
