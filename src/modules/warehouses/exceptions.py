"""Warehouse domain exceptions.

Raised by the Service Layer; the API layer (Views) translates them into
HTTP responses.
"""

from __future__ import annotations


class WarehouseNotFound(Exception):
    """The requested warehouse does not exist."""
