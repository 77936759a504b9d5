"""
Order Store: persists order aggregates and builds read projections.

Item names are resolved by joining order lines against the inventory table on
every read, so a renamed item shows its current name on later reads.
"""

import logging
from collections import defaultdict
from typing import Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from core.errors import StoreError
from core.order_assembler import OrderAggregate
from db.database import (
    InventoryItem as InventoryItemModel,
    Order as OrderModel,
    OrderItem as OrderItemModel,
    storable_id,
)
from schemas.orders import OrderItemRead, OrderRead

logger = logging.getLogger(__name__)

_HEADER_COLUMNS = (OrderModel.id, OrderModel.customer_name, OrderModel.placed_at)


def _serialize_order(header, lines: List[OrderItemRead]) -> OrderRead:
    return OrderRead(
        id=header.id,
        customer_name=header.customer_name,
        placed_at=header.placed_at,
        items=lines,
    )


async def _load_projections(db: AsyncSession, header_stmt) -> List[OrderRead]:
    """Run ``header_stmt`` and attach each order's lines with current item names."""
    headers = (await db.execute(header_stmt)).all()
    if not headers:
        return []

    lines_stmt = (
        select(
            OrderItemModel.id,
            OrderItemModel.order_id,
            OrderItemModel.inventory_item_id,
            OrderItemModel.quantity,
            InventoryItemModel.name,
        )
        .outerjoin(InventoryItemModel, InventoryItemModel.id == OrderItemModel.inventory_item_id)
        .where(OrderItemModel.order_id.in_([h.id for h in headers]))
        .order_by(OrderItemModel.id.asc())
    )
    lines_by_order: Dict[int, List[OrderItemRead]] = defaultdict(list)
    for (line_id, order_id, item_id, quantity, item_name) in (await db.execute(lines_stmt)).all():
        lines_by_order[order_id].append(
            OrderItemRead(id=line_id, inventory_item_id=item_id, item_name=item_name, quantity=quantity)
        )
    return [_serialize_order(h, lines_by_order.get(h.id, [])) for h in headers]


async def create_order(db: AsyncSession, aggregate: OrderAggregate) -> int:
    """Persist header and lines as one unit of work. Nothing is visible on failure."""
    o = OrderModel(
        customer_name=aggregate.customer_name,
        placed_at=aggregate.placed_at,
        items=[
            OrderItemModel(inventory_item_id=line.inventory_item_id, quantity=line.quantity)
            for line in aggregate.lines
        ],
    )
    db.add(o)
    try:
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        raise StoreError("failed to persist order") from e
    logger.info("Order %s persisted for %r with %d line(s)", o.id, o.customer_name, len(aggregate.lines))
    return o.id


async def get_order(db: AsyncSession, order_id: int) -> Optional[OrderRead]:
    if not storable_id(order_id):
        return None
    try:
        found = await _load_projections(db, select(*_HEADER_COLUMNS).where(OrderModel.id == order_id))
    except SQLAlchemyError as e:
        raise StoreError(f"failed to read order {order_id}") from e
    return found[0] if found else None


async def list_orders(db: AsyncSession) -> List[OrderRead]:
    # Ties on placed_at fall back to insertion order.
    stmt = select(*_HEADER_COLUMNS).order_by(OrderModel.placed_at.desc(), OrderModel.id.asc())
    try:
        return await _load_projections(db, stmt)
    except SQLAlchemyError as e:
        raise StoreError("failed to read orders") from e


async def delete_order(db: AsyncSession, order_id: int) -> bool:
    if not storable_id(order_id):
        return False
    try:
        res = await db.execute(select(OrderModel).where(OrderModel.id == order_id))
        o = res.scalar_one_or_none()
        if not o:
            return False
        await db.delete(o)
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        raise StoreError(f"failed to delete order {order_id}") from e
    logger.info("Order %s deleted", order_id)
    return True
