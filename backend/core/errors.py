"""Domain errors raised by the stores and the order assembler.

Routers translate these into HTTP responses (absent ids become 404 there);
``StoreError`` is handled at the application level as an unclassified 500.
"""

from enum import Enum
from typing import Iterable, Optional


class LogiTrackError(Exception):
    """Base class for every error the core raises on purpose."""


class ValidationError(LogiTrackError):
    """Client-correctable input problem. Never retried."""


class ValidationReason(str, Enum):
    EMPTY_CUSTOMER_NAME = "EmptyCustomerName"
    NO_ITEMS = "NoItems"
    NON_POSITIVE_QUANTITY = "NonPositiveQuantity"
    UNKNOWN_INVENTORY_ITEMS = "UnknownInventoryItems"


class OrderValidationError(ValidationError):
    def __init__(self, reason: ValidationReason, message: str):
        super().__init__(message)
        self.reason = reason
        self.message = message


class InventoryItemInUseError(LogiTrackError):
    def __init__(self, item_id: int, line_count: Optional[int] = None):
        msg = f"Inventory item {item_id} is referenced by existing order lines"
        if line_count:
            msg = f"Inventory item {item_id} is referenced by {line_count} order line(s)"
        super().__init__(msg)
        self.item_id = item_id
        self.line_count = line_count


class StoreError(LogiTrackError):
    """Underlying persistence failure; propagated, never retried."""


def format_ids(ids: Iterable[int]) -> str:
    return ", ".join(str(i) for i in sorted(ids))
