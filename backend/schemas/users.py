# Pydantic schemas for user-related requests/responses
# fastapi-users provides the base schemas; roles are the only extension.
# Roles are never accepted on registration or self-update, only through
# the superuser-only role assignment route.

from typing import List
from uuid import UUID

from fastapi_users import schemas
from pydantic import BaseModel, field_validator


class UserRead(schemas.BaseUser[UUID]):
    roles: List[str] = []


class UserCreate(schemas.BaseUserCreate):
    pass


class UserUpdate(schemas.BaseUserUpdate):
    pass


class UserRolesUpdate(BaseModel):
    roles: List[str]

    @field_validator("roles")
    @classmethod
    def _clean_roles(cls, v: List[str]) -> List[str]:
        return sorted({r.strip() for r in v if r and r.strip()})
