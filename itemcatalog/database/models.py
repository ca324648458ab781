"""Database models for the relational catalog backend."""

from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
    Index,
    UniqueConstraint,
)
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class ItemRecord(Base):
    """Model for storing catalog items."""

    __tablename__ = "items"

    # Insertion order of the item within the catalog
    position = Column(Integer, primary_key=True, autoincrement=True)

    # Item information
    item_id = Column(String(64), nullable=False)
    name = Column(Text, nullable=False)
    category = Column(Text, nullable=False, default="")
    image_name = Column(String(255), nullable=True)

    __table_args__ = (
        Index("idx_items_category", "category"),
        UniqueConstraint("item_id", name="uq_items_item_id"),
    )

    def __repr__(self):
        return f"<ItemRecord(position={self.position}, item_id='{self.item_id}', name='{self.name}')>"
