"""Warehouse DTOs for the Service Layer (pydantic v2, immutable)."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator


class UpdateWarehouseStockDTO(BaseModel):
    """Immutable DTO for a stock overwrite request."""

    model_config = ConfigDict(frozen=True)

    stock: int

    @field_validator("stock")
    @classmethod
    def stock_must_not_be_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("Stock cannot be negative.")
        return v
