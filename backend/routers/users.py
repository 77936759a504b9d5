import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from core.auth import Caller, current_active_user, current_caller
from db.database import get_async_session, User
from schemas.users import UserRead, UserRolesUpdate

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/me/roles")
async def get_my_roles(caller: Caller = Depends(current_caller)):
    """Capabilities the verified caller currently holds."""
    return {"id": caller.id, "email": caller.email, "roles": sorted(caller.roles)}


@router.put("/{user_id}/roles", response_model=UserRead)
async def set_user_roles(
    user_id: UUID,
    payload: UserRolesUpdate,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(current_active_user),
):
    if not user.is_superuser:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Superuser required")

    res = await db.execute(select(User).where(User.id == user_id))
    target = res.scalar_one_or_none()
    if not target:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    target.roles = payload.roles
    await db.commit()
    await db.refresh(target)
    logger.info("Superuser %s set roles of %s to %s", user.id, target.id, target.roles)
    return UserRead.model_validate(target)
