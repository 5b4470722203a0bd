"""Service layer exception classes for Recipe Costing.

The pure cost engine never raises; these exceptions are used by the
database-backed services when a record is missing or input is invalid.

Exception Hierarchy:
    ServiceError (base)
    ├── RecipeNotFound
    ├── InventoryItemNotFound
    ├── UnitConversionNotFound
    ├── DuplicateUnitConversion
    ├── ValidationError
    └── DatabaseError
"""

from typing import List, Optional


class ServiceError(Exception):
    """Base exception for all service layer errors.

    All service-specific exceptions should inherit from this class.
    """

    pass


class RecipeNotFound(ServiceError):
    """Raised when a recipe cannot be found by ID.

    Example:
        >>> raise RecipeNotFound(42)
        RecipeNotFound: Recipe with ID 42 not found
    """

    def __init__(self, recipe_id: int):
        self.recipe_id = recipe_id
        super().__init__(f"Recipe with ID {recipe_id} not found")


class InventoryItemNotFound(ServiceError):
    """Raised when inventory item cannot be found by ID.

    Example:
        >>> raise InventoryItemNotFound(456)
        InventoryItemNotFound: Inventory item with ID 456 not found
    """

    def __init__(self, inventory_item_id: int):
        self.inventory_item_id = inventory_item_id
        super().__init__(f"Inventory item with ID {inventory_item_id} not found")


class UnitConversionNotFound(ServiceError):
    """Raised when a custom unit conversion cannot be found by ID."""

    def __init__(self, conversion_id: int):
        self.conversion_id = conversion_id
        super().__init__(f"Unit conversion with ID {conversion_id} not found")


class DuplicateUnitConversion(ServiceError):
    """Raised when a conversion already exists for the same item and unit pair.

    Example:
        >>> raise DuplicateUnitConversion(7, "g", "unit")
        DuplicateUnitConversion: Inventory item 7 already has a g -> unit conversion
    """

    def __init__(self, inventory_item_id: int, recipe_unit: str, inventory_unit: str):
        self.inventory_item_id = inventory_item_id
        self.recipe_unit = recipe_unit
        self.inventory_unit = inventory_unit
        super().__init__(
            f"Inventory item {inventory_item_id} already has a "
            f"{recipe_unit} -> {inventory_unit} conversion"
        )


class ValidationError(ServiceError):
    """Raised when data validation fails."""

    def __init__(self, errors: List[str]):
        self.errors = errors
        error_msg = "; ".join(errors)
        super().__init__(f"Validation failed: {error_msg}")


class DatabaseError(ServiceError):
    """Raised when a database operation fails."""

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        self.original_error = original_error
        super().__init__(f"Database error: {message}")
