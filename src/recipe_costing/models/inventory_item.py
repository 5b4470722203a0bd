"""
InventoryItem model for purchased stock.

Stores the purchase unit economics of a stock item: how much comes in one
purchase, in what unit, and what it costs. Quantities and prices are kept as
decimal text so stored values never pass through binary floating point.

Example: Plain Flour
- purchase_quantity: "1000"
- purchase_unit: "g"
- purchase_price: "12.00"
"""

from sqlalchemy import Column, String, Text
from sqlalchemy.orm import relationship

from .base import BaseModel


class InventoryItem(BaseModel):
    """
    InventoryItem model representing one purchasable stock item.

    Attributes:
        name: Item name (e.g., "Ham Leg", "Plain Flour")
        purchase_quantity: Amount in one purchase, as decimal text (e.g., "1000")
        purchase_unit: Free-text purchase unit (e.g., "g", "kg", "each")
        purchase_price: Price of one purchase, as decimal text (e.g., "12.00")
        notes: Additional notes
    """

    __tablename__ = "inventory_items"

    name = Column(String(200), nullable=False, index=True)
    purchase_quantity = Column(String(50), nullable=False)
    purchase_unit = Column(String(50), nullable=False)
    purchase_price = Column(String(50), nullable=False)
    notes = Column(Text, nullable=True)

    # Relationships
    unit_conversions = relationship(
        "UnitConversion",
        back_populates="inventory_item",
        cascade="all, delete-orphan",
    )
    recipe_ingredients = relationship("RecipeIngredient", back_populates="inventory_item")

    def __repr__(self) -> str:
        """String representation of inventory item."""
        return (
            f"InventoryItem(id={self.id}, name='{self.name}', "
            f"{self.purchase_quantity} {self.purchase_unit} @ {self.purchase_price})"
        )
