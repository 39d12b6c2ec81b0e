"""Warehouse model: a stock counter with a fixed location.

Business rules implemented:
- Warehouse names are unique.
- Stock can never be negative (``PositiveIntegerField`` plus a database
  check constraint, so even a raw UPDATE cannot oversell).
- Coordinates are WGS84 degrees.
"""

from __future__ import annotations

import structlog
from django.core.exceptions import ValidationError
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from modules.core.models import BaseModel

logger = structlog.get_logger(__name__)


class Warehouse(BaseModel):
    """Physical stock location for the device SKU."""

    name = models.CharField(max_length=255, unique=True)
    latitude = models.FloatField(
        validators=[MinValueValidator(-90.0), MaxValueValidator(90.0)],
    )
    longitude = models.FloatField(
        validators=[MinValueValidator(-180.0), MaxValueValidator(180.0)],
    )
    stock = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = "warehouses"
        ordering = ["name"]
        indexes = [
            models.Index(fields=["stock"], name="warehouses_stock_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(stock__gte=0),
                name="warehouses_stock_non_negative",
            ),
        ]

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def clean(self) -> None:
        super().clean()
        if self.stock is not None and self.stock < 0:
            raise ValidationError({"stock": "Stock cannot be negative."})

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def save(self, *args, **kwargs) -> None:
        is_new = self._state.adding
        super().save(*args, **kwargs)
        if is_new:
            logger.info(
                "warehouse_created",
                warehouse_id=str(self.id),
                name=self.name,
                stock=self.stock,
            )

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def __str__(self) -> str:
        return f"{self.name} ({self.stock})"
