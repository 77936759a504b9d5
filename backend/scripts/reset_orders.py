"""
Delete ALL orders + order lines from the database.

Inventory items are left untouched, so the inventory list cache of a running
API stays valid.

Run from backend/:
  python scripts/reset_orders.py
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

BACKEND_DIR = Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from sqlalchemy import delete  # noqa: E402

from db.database import async_session_maker, Order, OrderItem  # noqa: E402


async def main() -> None:
    async with async_session_maker() as db:
        # Delete children first (FK)
        res_items = await db.execute(delete(OrderItem))
        res_orders = await db.execute(delete(Order))
        await db.commit()

        items_n = int(getattr(res_items, "rowcount", 0) or 0)
        orders_n = int(getattr(res_orders, "rowcount", 0) or 0)
        print(f"Deleted order_items: {items_n}, orders: {orders_n}")


if __name__ == "__main__":
    asyncio.run(main())
