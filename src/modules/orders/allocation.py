"""Greedy nearest-first warehouse allocation.

Shipping cost is linear in distance and separable per unit
(``rate * units * weight * km``), so serving every unit from the closest
warehouse that still has stock minimises total shipping: no combinatorial
search is needed.  Any replacement strategy has to keep that property.

Distance ties are broken by warehouse id, which makes the result a pure
function of (quantity, destination, stock snapshot).
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, List
from uuid import UUID

from modules.orders.constants import SHIPPING_RATE, UNIT_WEIGHT_KG
from modules.orders.exceptions import InsufficientStock, InvalidOrderInput
from modules.orders.pricing import to_cents
from modules.warehouses.domain import WarehouseSnapshot
from modules.warehouses.geo import haversine_km


@dataclass(frozen=True)
class AllocationLine:
    """Units drawn from one warehouse for one order."""

    warehouse_id: UUID
    warehouse_name: str
    quantity: int
    distance_km: float
    shipping_cost: Decimal
    exact_shipping_cost: Decimal


def exact_line_shipping_cost(quantity: int, distance_km: float) -> Decimal:
    """Unrounded shipping cost for ``quantity`` devices over ``distance_km``.

    The shipping cap is checked against this figure; only the stored and
    displayed amounts are rounded.
    """
    # str() gives the shortest repr of the float, so the Decimal carries no
    # binary noise beyond what the distance itself has.
    distance = Decimal(str(distance_km))
    return SHIPPING_RATE * quantity * UNIT_WEIGHT_KG * distance


def line_shipping_cost(quantity: int, distance_km: float) -> Decimal:
    """Shipping cost for ``quantity`` devices over ``distance_km``, in cents."""
    return to_cents(exact_line_shipping_cost(quantity, distance_km))


def rank_by_distance(
    latitude: float,
    longitude: float,
    candidates: Iterable[WarehouseSnapshot],
) -> List[tuple[float, WarehouseSnapshot]]:
    """Pair each stocked candidate with its distance, nearest first."""
    ranked = [
        (haversine_km(latitude, longitude, w.latitude, w.longitude), w)
        for w in candidates
        if w.stock > 0
    ]
    ranked.sort(key=lambda pair: (pair[0], str(pair[1].id)))
    return ranked


def allocate(
    quantity: int,
    latitude: float,
    longitude: float,
    candidates: Iterable[WarehouseSnapshot],
) -> List[AllocationLine]:
    """Draw ``quantity`` units from ``candidates`` nearest-first.

    Lines come out in non-decreasing distance order and their quantities
    sum to ``quantity``.

    Raises:
        InvalidOrderInput: quantity is not positive.
        InsufficientStock: the candidates together hold fewer units than
            requested.  No partial allocation is returned.
    """
    if quantity < 1:
        raise InvalidOrderInput(f"Quantity must be a positive integer, got {quantity!r}.")

    lines: List[AllocationLine] = []
    remaining = quantity

    for distance_km, warehouse in rank_by_distance(latitude, longitude, candidates):
        if remaining == 0:
            break
        drawn = min(remaining, warehouse.stock)
        lines.append(
            AllocationLine(
                warehouse_id=warehouse.id,
                warehouse_name=warehouse.name,
                quantity=drawn,
                distance_km=distance_km,
                shipping_cost=line_shipping_cost(drawn, distance_km),
                exact_shipping_cost=exact_line_shipping_cost(drawn, distance_km),
            )
        )
        remaining -= drawn

    if remaining > 0:
        raise InsufficientStock(requested=quantity, available=quantity - remaining)

    return lines
