"""
Database models package.

This package contains all SQLAlchemy ORM models for the application.
"""

from .base import Base, BaseModel
from .inventory_item import InventoryItem
from .recipe import Recipe, RecipeIngredient
from .unit_conversion import UnitConversion

__all__ = [
    "Base",
    "BaseModel",
    "InventoryItem",
    "Recipe",
    "RecipeIngredient",
    "UnitConversion",
]
