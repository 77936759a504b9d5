from sqlalchemy import Column, Index, Integer, String

from .database import Base


class InventoryItem(Base):
    __tablename__ = "inventory_items"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False)
    quantity = Column(Integer, nullable=False, default=0)
    location = Column(String(100), nullable=False)

    __table_args__ = (
        Index("ix_inventory_items_name_location", "name", "location"),
        # Never hand out a deleted item's id again.
        {"sqlite_autoincrement": True},
    )

    @property
    def to_schema(self):
        return {
            "id": self.id,
            "name": self.name,
            "quantity": self.quantity,
            "location": self.location,
        }
