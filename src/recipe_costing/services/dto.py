"""Data Transfer Objects for the cost engine.

Immutable value types passed into and returned from the pure costing
functions. The database-backed services build these from ORM rows so the
engine itself never touches a session.

Input types:
    InventoryPurchaseRecord, RecipeIngredientLine, CustomUnitConversion

Result types:
    CostCalculationResult, IngredientCost, UnitMismatchWarning,
    RecipeCostBreakdown, CostPreview
"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, Optional, Tuple


class CostStatus(str, Enum):
    """
    Outcome of costing a single recipe line.

    Values:
        COSTED: Units reconciled and a cost computed
        INCOMPLETE: Missing or unparseable quantity/price; line is worth nothing
        UNIT_MISMATCH: Units could not be reconciled; cost forced to zero
        UNLINKED: Line has no inventory item to price it
    """

    COSTED = "costed"
    INCOMPLETE = "incomplete"
    UNIT_MISMATCH = "unit_mismatch"
    UNLINKED = "unlinked"


@dataclass(frozen=True)
class InventoryPurchaseRecord:
    """Purchase economics of one stock item.

    Attributes:
        id: Inventory item identifier
        name: Item name
        purchase_quantity: Amount in one purchase, as text (e.g., "1000")
        purchase_unit: Free-text unit (e.g., "g")
        purchase_price: Price of one purchase, as text (e.g., "12.00")
    """

    id: Any
    name: str
    purchase_quantity: str
    purchase_unit: str
    purchase_price: str


@dataclass(frozen=True)
class RecipeIngredientLine:
    """One recipe line with its linked inventory record.

    Attributes:
        quantity: Quantity text ("200", "½", "1/4", "1 ½")
        unit: Free-text recipe unit
        inventory_item: Linked purchase record, or None for an unlinked line
        name: Ingredient name as written in the recipe
    """

    quantity: str
    unit: str
    inventory_item: Optional[InventoryPurchaseRecord] = None
    name: str = ""


@dataclass(frozen=True)
class CustomUnitConversion:
    """Item-scoped conversion: 1 recipe_unit = conversion_factor inventory_units.

    The direction is part of the contract. A conversion only applies to lines
    whose recipe unit is ``recipe_unit`` and whose inventory unit is
    ``inventory_unit``.
    """

    inventory_item_id: Any
    recipe_unit: str
    inventory_unit: str
    conversion_factor: str
    id: Any = None


@dataclass(frozen=True)
class CostCalculationResult:
    """Cost of one recipe line.

    Attributes:
        cost: Non-negative cost; exactly zero unless status is COSTED
        has_unit_mismatch: True when units could not be reconciled
        used_conversion: Custom conversion applied, if any
        conversion_factor: Factor applied to the recipe quantity, if any
        status: Outcome classification
    """

    cost: Decimal
    has_unit_mismatch: bool = False
    used_conversion: Optional[CustomUnitConversion] = None
    conversion_factor: Optional[Decimal] = None
    status: CostStatus = CostStatus.COSTED


@dataclass(frozen=True)
class IngredientCost:
    """A recipe line paired with its cost result."""

    line: RecipeIngredientLine
    result: CostCalculationResult

    @property
    def cost(self) -> Decimal:
        return self.result.cost

    @property
    def has_unit_mismatch(self) -> bool:
        return self.result.has_unit_mismatch


@dataclass(frozen=True)
class UnitMismatchWarning:
    """A recipe line whose unit differs from its inventory unit.

    ``can_convert`` is True when a custom conversion resolves the line
    (informational) and False when the line cannot be costed (actionable).
    Units are reported as the user typed them.
    """

    ingredient_name: str
    recipe_unit: str
    inventory_unit: str
    inventory_item_id: Any
    inventory_item_name: str
    can_convert: bool
    conversion: Optional[CustomUnitConversion] = None


@dataclass(frozen=True)
class RecipeCostBreakdown:
    """Recipe total with per-line results and unresolved mismatches.

    Attributes:
        total_cost: Sum of line costs; a lower bound while mismatches exist
        ingredient_costs: One entry per input line, in input order
        mismatches: Unresolved mismatches only (can_convert is False)
        linked_count: Lines linked to an inventory item
        total_ingredients: All lines
    """

    total_cost: Decimal
    ingredient_costs: Tuple[IngredientCost, ...] = field(default_factory=tuple)
    mismatches: Tuple[UnitMismatchWarning, ...] = field(default_factory=tuple)
    linked_count: int = 0
    total_ingredients: int = 0

    @property
    def has_mismatches(self) -> bool:
        """True when at least one line cannot be costed because of its units."""
        return len(self.mismatches) > 0

    @property
    def is_complete(self) -> bool:
        """True when every line is linked and no mismatch is outstanding."""
        return not self.has_mismatches and self.linked_count == self.total_ingredients


@dataclass(frozen=True)
class CostPreview:
    """Price per base unit of an inventory purchase (e.g., $0.012 per g)."""

    cost_per_unit: Decimal
    display_unit: str
