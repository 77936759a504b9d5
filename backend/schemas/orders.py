from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime


class OrderLineCreate(BaseModel):
    inventory_item_id: int
    quantity: int = 1


class OrderCreate(BaseModel):
    # Blank names, empty item lists and non-positive quantities are rejected by
    # the order assembler with a reason code, not here.
    customer_name: str = Field("", max_length=200)
    placed_at: Optional[datetime] = None
    items: List[OrderLineCreate] = []


class OrderItemRead(BaseModel):
    id: int
    inventory_item_id: int
    item_name: Optional[str] = None
    quantity: int


class OrderRead(BaseModel):
    id: int
    customer_name: str
    placed_at: datetime
    items: List[OrderItemRead]
