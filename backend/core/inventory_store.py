"""
Inventory Store: durable keyed collection of inventory items.

Every function takes the request's ``AsyncSession``; writes commit before
returning. ``SQLAlchemyError`` is re-raised as ``StoreError``.
"""

from typing import Iterable, List, Optional, Set

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from core.errors import InventoryItemInUseError, StoreError
from db.database import InventoryItem as InventoryItemModel, OrderItem as OrderItemModel, storable_id
from schemas.inventory import InventoryItemRead


async def list_items(db: AsyncSession) -> List[InventoryItemRead]:
    try:
        res = await db.execute(select(InventoryItemModel).order_by(InventoryItemModel.id.asc()))
    except SQLAlchemyError as e:
        raise StoreError("failed to read inventory items") from e
    return [InventoryItemRead(**i.to_schema) for i in res.scalars().all()]


async def get_item(db: AsyncSession, item_id: int) -> Optional[InventoryItemModel]:
    if not storable_id(item_id):
        return None
    try:
        res = await db.execute(select(InventoryItemModel).where(InventoryItemModel.id == item_id))
    except SQLAlchemyError as e:
        raise StoreError(f"failed to read inventory item {item_id}") from e
    return res.scalar_one_or_none()


async def existing_ids(db: AsyncSession, item_ids: Iterable[int]) -> Set[int]:
    """One batch existence check; returns the subset of ``item_ids`` that exist."""
    ids = {i for i in item_ids if storable_id(i)}
    if not ids:
        return set()
    try:
        res = await db.execute(select(InventoryItemModel.id).where(InventoryItemModel.id.in_(ids)))
    except SQLAlchemyError as e:
        raise StoreError("failed to check inventory item existence") from e
    return {row[0] for row in res.all()}


async def insert_item(db: AsyncSession, *, name: str, quantity: int, location: str) -> InventoryItemRead:
    m = InventoryItemModel(name=name, quantity=quantity, location=location)
    db.add(m)
    try:
        await db.commit()
        await db.refresh(m)
    except SQLAlchemyError as e:
        await db.rollback()
        raise StoreError("failed to insert inventory item") from e
    return InventoryItemRead(**m.to_schema)


async def update_item(db: AsyncSession, m: InventoryItemModel, data: dict) -> InventoryItemRead:
    for field in ("name", "quantity", "location"):
        if data.get(field) is not None:
            setattr(m, field, data[field])
    try:
        await db.commit()
        await db.refresh(m)
    except SQLAlchemyError as e:
        await db.rollback()
        raise StoreError(f"failed to update inventory item {m.id}") from e
    return InventoryItemRead(**m.to_schema)


async def count_referencing_lines(db: AsyncSession, item_id: int) -> int:
    try:
        res = await db.execute(
            select(func.count()).select_from(OrderItemModel).where(OrderItemModel.inventory_item_id == item_id)
        )
    except SQLAlchemyError as e:
        raise StoreError(f"failed to count order lines for inventory item {item_id}") from e
    return int(res.scalar_one() or 0)


async def delete_item(db: AsyncSession, item_id: int) -> bool:
    """Delete an item. Returns False when absent; refuses items referenced by order lines."""
    m = await get_item(db, item_id)
    if not m:
        return False

    line_count = await count_referencing_lines(db, item_id)
    if line_count:
        raise InventoryItemInUseError(item_id, line_count)

    await db.delete(m)
    try:
        await db.commit()
    except IntegrityError as e:
        # A line was added concurrently; the FK restrict rule rejected the delete.
        await db.rollback()
        raise InventoryItemInUseError(item_id) from e
    except SQLAlchemyError as e:
        await db.rollback()
        raise StoreError(f"failed to delete inventory item {item_id}") from e
    return True
