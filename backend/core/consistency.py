"""
Inventory mutations that keep the inventory list cache honest.

Every successful create, update or delete invalidates ``inventory:list``
before returning. Order creation and deletion never go through here.
"""

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from core import inventory_store
from core.cache import INVENTORY_LIST_KEY, ReadThroughCache
from schemas.inventory import InventoryItemCreate, InventoryItemRead, InventoryItemUpdate

logger = logging.getLogger(__name__)


async def create_inventory_item(
    db: AsyncSession, cache: ReadThroughCache, payload: InventoryItemCreate
) -> InventoryItemRead:
    item = await inventory_store.insert_item(
        db, name=payload.name, quantity=payload.quantity, location=payload.location
    )
    cache.invalidate(INVENTORY_LIST_KEY)
    logger.info("Created inventory item %s (%s @ %s)", item.id, item.name, item.location)
    return item


async def update_inventory_item(
    db: AsyncSession, cache: ReadThroughCache, item_id: int, payload: InventoryItemUpdate
) -> Optional[InventoryItemRead]:
    m = await inventory_store.get_item(db, item_id)
    if not m:
        return None
    item = await inventory_store.update_item(db, m, payload.model_dump(exclude_unset=True))
    cache.invalidate(INVENTORY_LIST_KEY)
    logger.info("Updated inventory item %s", item_id)
    return item


async def delete_inventory_item(db: AsyncSession, cache: ReadThroughCache, item_id: int) -> bool:
    deleted = await inventory_store.delete_item(db, item_id)
    if deleted:
        cache.invalidate(INVENTORY_LIST_KEY)
        logger.info("Deleted inventory item %s", item_id)
    return deleted
