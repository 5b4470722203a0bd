"""
Recipe models.

This module contains:
- Recipe: Main recipe model with serving and pricing metadata
- RecipeIngredient: One line of a recipe, optionally linked to an inventory item
"""

from sqlalchemy import Boolean, Column, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import relationship

from .base import BaseModel


class Recipe(BaseModel):
    """
    Recipe model.

    Attributes:
        name: Recipe name (required)
        category: Recipe category (e.g., "sandwiches", "sauces")
        servings: Number of servings, as text (blank when unknown)
        retail_price: Selling price of one serving, as decimal text (blank when not sold)
        notes: Additional notes
        is_archived: Whether the recipe is archived
    """

    __tablename__ = "recipes"

    name = Column(String(200), nullable=False, index=True)
    category = Column(String(100), nullable=False, default="", index=True)
    servings = Column(String(50), nullable=False, default="")
    retail_price = Column(String(50), nullable=False, default="")
    notes = Column(Text, nullable=True)
    is_archived = Column(Boolean, nullable=False, default=False)

    # Relationships
    recipe_ingredients = relationship(
        "RecipeIngredient",
        back_populates="recipe",
        cascade="all, delete-orphan",
        order_by="RecipeIngredient.id",
    )

    def __repr__(self) -> str:
        """String representation of recipe."""
        return f"Recipe(id={self.id}, name='{self.name}', category='{self.category}')"


class RecipeIngredient(BaseModel):
    """
    One ingredient line of a recipe.

    Attributes:
        recipe_id: Foreign key to Recipe
        name: Free-text ingredient name as written in the recipe
        quantity: Quantity text; may be a decimal or a fraction ("½", "1/4", "1 ½")
        unit: Free-text recipe unit (e.g., "g", "cups", "each")
        modifier: Preparation note (e.g., "finely chopped")
        inventory_item_id: Optional link to the InventoryItem that prices this line
    """

    __tablename__ = "recipe_ingredients"

    recipe_id = Column(
        Integer, ForeignKey("recipes.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name = Column(String(200), nullable=False)
    quantity = Column(String(50), nullable=False)
    unit = Column(String(50), nullable=False)
    modifier = Column(String(200), nullable=True)
    inventory_item_id = Column(
        Integer, ForeignKey("inventory_items.id", ondelete="SET NULL"), nullable=True
    )

    # Relationships
    recipe = relationship("Recipe", back_populates="recipe_ingredients")
    inventory_item = relationship("InventoryItem", back_populates="recipe_ingredients")

    __table_args__ = (Index("idx_recipe_ingredient_inventory", "inventory_item_id"),)

    def __repr__(self) -> str:
        """String representation of recipe ingredient."""
        return (
            f"RecipeIngredient(id={self.id}, recipe_id={self.recipe_id}, "
            f"{self.quantity} {self.unit} {self.name})"
        )
