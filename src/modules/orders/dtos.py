"""Order DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the API layer (DRF Serializers)
and the Service layer.  DTOs are immutable (``frozen=True``).

- ``OrderRequestDTO``: quantity + destination, shared by verify and create.
- ``CreateOrderDTO``: adds the optional idempotency key.

The range checks repeat what the serializers already enforce so the
service can be driven safely without the HTTP layer.
"""

from __future__ import annotations

import math
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator


class OrderRequestDTO(BaseModel):
    """Immutable DTO for a verify/create request."""

    model_config = ConfigDict(frozen=True)

    quantity: int
    latitude: float
    longitude: float

    @field_validator("quantity")
    @classmethod
    def quantity_must_be_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Quantity must be a positive integer.")
        return v

    @field_validator("latitude")
    @classmethod
    def latitude_in_range(cls, v: float) -> float:
        if math.isnan(v) or not -90.0 <= v <= 90.0:
            raise ValueError("Latitude must be between -90 and 90.")
        return v

    @field_validator("longitude")
    @classmethod
    def longitude_in_range(cls, v: float) -> float:
        if math.isnan(v) or not -180.0 <= v <= 180.0:
            raise ValueError("Longitude must be between -180 and 180.")
        return v


class CreateOrderDTO(OrderRequestDTO):
    """Immutable DTO for order creation requests."""

    idempotency_key: Optional[str] = None

