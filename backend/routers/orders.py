import logging
import time
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from core import order_store
from core.auth import Caller, current_caller, require_manager
from core.errors import OrderValidationError
from core.order_assembler import assemble_order
from db.database import get_async_session
from schemas.orders import OrderCreate, OrderRead

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/", response_model=List[OrderRead])
async def list_orders(
    response: Response,
    db: AsyncSession = Depends(get_async_session),
    caller: Caller = Depends(current_caller),
):
    """All orders, newest placement first."""
    started = time.perf_counter()
    orders = await order_store.list_orders(db)
    response.headers["X-Elapsed-ms"] = str(int((time.perf_counter() - started) * 1000))
    return orders


@router.get("/{order_id}", response_model=OrderRead)
async def get_order(
    order_id: int,
    db: AsyncSession = Depends(get_async_session),
    caller: Caller = Depends(current_caller),
):
    o = await order_store.get_order(db, order_id)
    if not o:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Order not found")
    return o


@router.post("/", response_model=OrderRead, status_code=status.HTTP_201_CREATED)
async def create_order(
    payload: OrderCreate,
    db: AsyncSession = Depends(get_async_session),
    caller: Caller = Depends(current_caller),
):
    try:
        aggregate = await assemble_order(db, payload.customer_name, payload.items, payload.placed_at)
    except OrderValidationError as e:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": e.message, "reason": e.reason.value},
        )

    order_id = await order_store.create_order(db, aggregate)
    created = await order_store.get_order(db, order_id)
    if not created:
        # Committed but not readable back: treat as a store failure.
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Order could not be read back")
    logger.info("Order %s created by %s", order_id, caller.email)
    return created


@router.delete("/{order_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_order(
    order_id: int,
    db: AsyncSession = Depends(get_async_session),
    caller: Caller = Depends(require_manager),
):
    deleted = await order_store.delete_order(db, order_id)
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Order not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
