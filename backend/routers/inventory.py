from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from core import consistency, inventory_store
from core.auth import Caller, current_caller, require_manager
from core.cache import INVENTORY_LIST_KEY, ReadThroughCache, get_inventory_cache
from core.errors import InventoryItemInUseError
from db.database import get_async_session
from schemas.inventory import InventoryItemCreate, InventoryItemRead, InventoryItemUpdate

router = APIRouter()


@router.get("/", response_model=List[InventoryItemRead])
async def list_inventory(
    response: Response,
    db: AsyncSession = Depends(get_async_session),
    cache: ReadThroughCache = Depends(get_inventory_cache),
    caller: Caller = Depends(current_caller),
):
    """List inventory items (id ascending), served through the read-through cache."""
    lookup = await cache.get_or_load(INVENTORY_LIST_KEY, lambda: inventory_store.list_items(db))
    response.headers["X-Cache"] = lookup.status
    response.headers["X-Elapsed-ms"] = str(lookup.elapsed_ms)
    return lookup.value


@router.post("/", response_model=InventoryItemRead, status_code=status.HTTP_201_CREATED)
async def create_inventory_item(
    payload: InventoryItemCreate,
    db: AsyncSession = Depends(get_async_session),
    cache: ReadThroughCache = Depends(get_inventory_cache),
    caller: Caller = Depends(require_manager),
):
    return await consistency.create_inventory_item(db, cache, payload)


@router.patch("/{item_id}", response_model=InventoryItemRead)
async def update_inventory_item(
    item_id: int,
    payload: InventoryItemUpdate,
    db: AsyncSession = Depends(get_async_session),
    cache: ReadThroughCache = Depends(get_inventory_cache),
    caller: Caller = Depends(require_manager),
):
    item = await consistency.update_inventory_item(db, cache, item_id, payload)
    if item is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Inventory item not found")
    return item


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_inventory_item(
    item_id: int,
    db: AsyncSession = Depends(get_async_session),
    cache: ReadThroughCache = Depends(get_inventory_cache),
    caller: Caller = Depends(require_manager),
):
    try:
        deleted = await consistency.delete_inventory_item(db, cache, item_id)
    except InventoryItemInUseError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Inventory item not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
