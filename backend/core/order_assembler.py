"""
Order Assembler: validates an order request against current inventory and
builds the aggregate the Order Store persists.

Existence is checked against the Inventory Store in the caller's session,
never against the inventory list cache.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from core import inventory_store
from core.errors import OrderValidationError, ValidationReason, format_ids
from schemas.orders import OrderLineCreate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OrderLineDraft:
    inventory_item_id: int
    quantity: int


@dataclass
class OrderAggregate:
    customer_name: str
    placed_at: datetime
    lines: List[OrderLineDraft] = field(default_factory=list)


def _as_utc(dt: datetime) -> datetime:
    # Naive timestamps are taken to be UTC already.
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def _reject(reason: ValidationReason, message: str):
    logger.info("Order rejected (%s): %s", reason.value, message)
    raise OrderValidationError(reason, message)


async def assemble_order(
    db: AsyncSession,
    customer_name: Optional[str],
    items: Sequence[OrderLineCreate],
    placed_at: Optional[datetime] = None,
) -> OrderAggregate:
    name = (customer_name or "").strip()
    if not name:
        _reject(ValidationReason.EMPTY_CUSTOMER_NAME, "customer_name is required")
    if not items:
        _reject(ValidationReason.NO_ITEMS, "At least one item is required")
    if any(line.quantity <= 0 for line in items):
        _reject(ValidationReason.NON_POSITIVE_QUANTITY, "Item quantities must be positive")

    requested = {line.inventory_item_id for line in items}
    found = await inventory_store.existing_ids(db, requested)
    if len(found) < len(requested):
        missing = requested - found
        _reject(
            ValidationReason.UNKNOWN_INVENTORY_ITEMS,
            f"Unknown inventory item ids: {format_ids(missing)}",
        )

    return OrderAggregate(
        customer_name=name,
        placed_at=_as_utc(placed_at) if placed_at is not None else datetime.now(timezone.utc),
        lines=[OrderLineDraft(inventory_item_id=line.inventory_item_id, quantity=line.quantity) for line in items],
    )
