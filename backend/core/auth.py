import logging
import uuid
from dataclasses import dataclass
from typing import FrozenSet, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi_users import BaseUserManager, FastAPIUsers, UUIDIDMixin
from fastapi_users.authentication import AuthenticationBackend, BearerTransport, JWTStrategy

from core.config import settings
from db.database import User
from db.users import get_user_db

logger = logging.getLogger(__name__)

SECRET = settings.jwt_secret


class UserManager(UUIDIDMixin, BaseUserManager[User, uuid.UUID]):
    reset_password_token_secret = SECRET
    verification_token_secret = SECRET

    async def on_after_register(self, user: User, request: Optional[Request] = None):
        logger.info("User %s registered with roles %s", user.id, user.roles)


async def get_user_manager(user_db=Depends(get_user_db)):
    yield UserManager(user_db)


bearer_transport = BearerTransport(tokenUrl="api/auth/jwt/login")


def get_jwt_strategy() -> JWTStrategy:
    return JWTStrategy(secret=SECRET, lifetime_seconds=settings.jwt_lifetime_seconds)


auth_backend = AuthenticationBackend(
    name="jwt",
    transport=bearer_transport,
    get_strategy=get_jwt_strategy,
)

fastapi_users = FastAPIUsers[User, uuid.UUID](get_user_manager, [auth_backend])

current_active_user = fastapi_users.current_user(active=True)


@dataclass(frozen=True)
class Caller:
    """Verified identity plus the capabilities granted to it."""
    id: uuid.UUID
    email: str
    roles: FrozenSet[str]

    def has_role(self, role: str) -> bool:
        return role in self.roles


def caller_from_user(user: User) -> Caller:
    roles = set(user.roles or [])
    if user.is_superuser:
        roles.add(settings.manager_role)
    return Caller(id=user.id, email=user.email, roles=frozenset(roles))


async def current_caller(user: User = Depends(current_active_user)) -> Caller:
    return caller_from_user(user)


def require_role(role: str):
    """Dependency factory: the caller must hold ``role`` before anything is mutated."""

    async def _require(caller: Caller = Depends(current_caller)) -> Caller:
        if not caller.has_role(role):
            logger.warning("Caller %s lacks role %s", caller.id, role)
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=f"{role} role required")
        return caller

    return _require


require_manager = require_role(settings.manager_role)
