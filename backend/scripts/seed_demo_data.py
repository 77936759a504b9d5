import asyncio
import os
import sys
from pathlib import Path

"""
Seed a manager user and a few inventory items into the LogiTrack DB.

Idempotent: existing users/items (matched by email, name + location) are kept.

This script can be run from either:
- backend/: `python scripts/seed_demo_data.py`
- repo root: `python backend/scripts/seed_demo_data.py`

Environment:
- SEED_MANAGER_EMAIL (default: manager@logitrack.local)
- SEED_MANAGER_PASSWORD (default: manager123)
"""

# Allow running from repo root by ensuring `backend/` is on sys.path
BACKEND_DIR = Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from sqlalchemy import select  # noqa: E402

from core.config import settings  # noqa: E402
from db.database import async_session_maker, create_db_and_tables, InventoryItem, User  # noqa: E402

from fastapi_users.password import PasswordHelper  # noqa: E402


password_helper = PasswordHelper()

DEMO_ITEMS = [
    {"name": "Pallet", "quantity": 10, "location": "A1"},
    {"name": "Crate", "quantity": 5, "location": "B2"},
    {"name": "Shrink Wrap Roll", "quantity": 24, "location": "C3"},
]


async def get_or_create_manager(session, email: str, password: str) -> User:
    result = await session.execute(select(User).where(User.email == email))
    user = result.scalar_one_or_none()
    if user:
        if settings.manager_role not in (user.roles or []):
            user.roles = [*(user.roles or []), settings.manager_role]
        return user

    user = User(
        email=email,
        hashed_password=password_helper.hash(password),
        is_active=True,
        is_superuser=False,
        is_verified=True,
        roles=[settings.manager_role],
    )
    session.add(user)
    await session.flush()
    return user


async def get_or_create_item(session, name: str, quantity: int, location: str) -> InventoryItem:
    result = await session.execute(
        select(InventoryItem).where(InventoryItem.name == name, InventoryItem.location == location)
    )
    item = result.scalars().first()
    if item:
        return item

    item = InventoryItem(name=name, quantity=quantity, location=location)
    session.add(item)
    await session.flush()
    return item


async def seed() -> None:
    await create_db_and_tables()
    email = os.getenv("SEED_MANAGER_EMAIL", "manager@logitrack.local")
    password = os.getenv("SEED_MANAGER_PASSWORD", "manager123")

    async with async_session_maker() as session:
        user = await get_or_create_manager(session, email, password)
        for spec in DEMO_ITEMS:
            await get_or_create_item(session, **spec)
        await session.commit()

    print(f"Seeded manager {user.email} and {len(DEMO_ITEMS)} inventory items")


if __name__ == "__main__":
    asyncio.run(seed())
