from typing import Optional

from pydantic import BaseModel, Field, field_validator


NAME_MAX_LENGTH = 200
LOCATION_MAX_LENGTH = 100


class InventoryItemRead(BaseModel):
    id: int
    name: str
    quantity: int
    location: str


class InventoryItemCreate(BaseModel):
    name: str = Field(max_length=NAME_MAX_LENGTH)
    quantity: int = Field(ge=0)
    location: str = Field(max_length=LOCATION_MAX_LENGTH)

    @field_validator("name", "location")
    @classmethod
    def _strip_required(cls, v: str) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("field is required")
        return v


class InventoryItemUpdate(BaseModel):
    name: Optional[str] = Field(None, max_length=NAME_MAX_LENGTH)
    quantity: Optional[int] = Field(None, ge=0)
    location: Optional[str] = Field(None, max_length=LOCATION_MAX_LENGTH)

    @field_validator("name", "location")
    @classmethod
    def _strip_optional(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = (v or "").strip()
        if not v:
            raise ValueError("cannot be empty")
        return v
