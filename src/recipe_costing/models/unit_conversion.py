"""
UnitConversion model for item-specific custom unit conversions.

A custom conversion tells the cost engine how many inventory units one
recipe unit represents for a single inventory item, when no standard
physical conversion exists between the two units.

Example: Ham Leg bought by the "unit", used in recipes by weight
- recipe_unit: "g"
- inventory_unit: "unit"
- conversion_factor: "0.002"
Meaning: 1 g = 0.002 units (one leg weighs 500 g)

Conversions are directional. A conversion authored from inventory unit to
recipe unit does not match a recipe line.
"""

from sqlalchemy import Column, ForeignKey, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from .base import BaseModel


class UnitConversion(BaseModel):
    """
    UnitConversion model for one inventory item.

    Attributes:
        inventory_item_id: Foreign key to InventoryItem
        recipe_unit: Canonical unit used by recipes (e.g., "g")
        inventory_unit: Canonical purchase unit of the item (e.g., "unit")
        conversion_factor: Inventory units per one recipe unit, as decimal text
        notes: Additional notes (e.g., "bone-in weight")
    """

    __tablename__ = "unit_conversions"

    inventory_item_id = Column(
        Integer, ForeignKey("inventory_items.id", ondelete="CASCADE"), nullable=False, index=True
    )
    recipe_unit = Column(String(50), nullable=False)
    inventory_unit = Column(String(50), nullable=False)
    conversion_factor = Column(String(50), nullable=False)
    notes = Column(Text, nullable=True)

    # Relationships
    inventory_item = relationship("InventoryItem", back_populates="unit_conversions")

    __table_args__ = (
        UniqueConstraint(
            "inventory_item_id",
            "recipe_unit",
            "inventory_unit",
            name="uq_conversion_item_units",
        ),
        Index("idx_conversion_item_units", "inventory_item_id", "recipe_unit", "inventory_unit"),
    )

    def __repr__(self) -> str:
        """String representation of conversion."""
        return (
            f"UnitConversion(id={self.id}, "
            f"inventory_item_id={self.inventory_item_id}, "
            f"1 {self.recipe_unit} = {self.conversion_factor} {self.inventory_unit})"
        )
