"""Order domain constants.

Status choices and the device parameters every price and shipping
computation is based on.  The engine handles a single device SKU, so its
price and weight are constants rather than catalog rows.
"""

from decimal import Decimal

from django.db import models


class OrderStatus(models.TextChoices):
    PENDING = "PENDING", "Pending"
    PROCESSING = "PROCESSING", "Processing"
    COMPLETED = "COMPLETED", "Completed"
    CANCELLED = "CANCELLED", "Cancelled"


# Device
UNIT_PRICE = Decimal("150.00")
UNIT_WEIGHT_KG = Decimal("0.365")

# Shipping: dollars per kilogram per kilometre
SHIPPING_RATE = Decimal("0.01")

# An order is rejected when shipping exceeds this share of the discounted total
MAX_SHIPPING_RATIO = Decimal("0.15")

# Money is carried as Decimal quantized to cents end-to-end
CENTS = Decimal("0.01")

ORDER_NUMBER_MAX_RETRIES = 5
