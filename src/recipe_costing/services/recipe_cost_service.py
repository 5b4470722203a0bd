"""
Recipe Cost Service - Database-backed entry points for recipe costing.

This service loads recipes, inventory pricing and custom unit conversions,
converts them into the cost engine's value types and delegates every
calculation to recipe_cost_calculator. It also manages the custom unit
conversions users create after seeing an unresolved unit mismatch.

All functions accept an optional session parameter to support being called
from other service functions that need to maintain transactional atomicity.

Example Usage:
    >>> from recipe_costing.services import recipe_cost_service
    >>> recipe_cost_service.calculate_recipe_cost(42)
    Decimal('12.40')
    >>> [m.inventory_item_name for m in recipe_cost_service.check_recipe_units(42)]
    ['Ham Leg']
"""

import logging
from decimal import Decimal
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from recipe_costing.models import InventoryItem, Recipe, RecipeIngredient, UnitConversion
from recipe_costing.services import recipe_cost_calculator
from recipe_costing.services.database import session_scope
from recipe_costing.services.dto import (
    CustomUnitConversion,
    InventoryPurchaseRecord,
    RecipeCostBreakdown,
    RecipeIngredientLine,
    UnitMismatchWarning,
)
from recipe_costing.services.exceptions import (
    DatabaseError,
    DuplicateUnitConversion,
    InventoryItemNotFound,
    RecipeNotFound,
    UnitConversionNotFound,
    ValidationError,
)
from recipe_costing.services.logging_utils import get_service_logger, log_operation
from recipe_costing.services.quantity_parser import parse_decimal
from recipe_costing.services.unit_converter import get_standard_conversion_factor, normalize_unit
from recipe_costing.utils.config import get_config
from recipe_costing.utils.constants import MAX_CONVERSION_FACTOR, MAX_UNIT_LENGTH

logger = get_service_logger(__name__)

T = TypeVar("T")


def _run(session: Optional[Session], impl: Callable[[Session], T], failure: str) -> T:
    """Run impl in the caller's session or a new session scope, wrapping database errors."""
    try:
        if session is not None:
            return impl(session)
        with session_scope() as sess:
            return impl(sess)
    except SQLAlchemyError as e:
        log_operation(logger, operation=failure, outcome="error", level=logging.ERROR, error=str(e))
        raise DatabaseError(f"Failed to {failure.replace('_', ' ')}", e)


# ============================================================================
# Row -> Value Type Conversion
# ============================================================================


def _to_purchase_record(item: InventoryItem) -> InventoryPurchaseRecord:
    return InventoryPurchaseRecord(
        id=item.id,
        name=item.name,
        purchase_quantity=item.purchase_quantity,
        purchase_unit=item.purchase_unit,
        purchase_price=item.purchase_price,
    )


def _to_line(recipe_ingredient: RecipeIngredient) -> RecipeIngredientLine:
    item = recipe_ingredient.inventory_item
    return RecipeIngredientLine(
        quantity=recipe_ingredient.quantity,
        unit=recipe_ingredient.unit,
        inventory_item=_to_purchase_record(item) if item is not None else None,
        name=recipe_ingredient.name,
    )


def _to_custom_conversion(conversion: UnitConversion) -> CustomUnitConversion:
    return CustomUnitConversion(
        inventory_item_id=conversion.inventory_item_id,
        recipe_unit=conversion.recipe_unit,
        inventory_unit=conversion.inventory_unit,
        conversion_factor=conversion.conversion_factor,
        id=conversion.id,
    )


# ============================================================================
# Loading
# ============================================================================


def _get_recipe(sess: Session, recipe_id: int) -> Recipe:
    recipe = (
        sess.query(Recipe)
        .options(selectinload(Recipe.recipe_ingredients).selectinload(RecipeIngredient.inventory_item))
        .filter(Recipe.id == recipe_id)
        .first()
    )
    if recipe is None:
        raise RecipeNotFound(recipe_id)
    return recipe


def _query_conversions(sess: Session, inventory_item_ids: Optional[Iterable[int]]) -> List[CustomUnitConversion]:
    query = sess.query(UnitConversion)
    if inventory_item_ids is not None:
        ids = list(inventory_item_ids)
        if not ids:
            return []
        query = query.filter(UnitConversion.inventory_item_id.in_(ids))
    return [_to_custom_conversion(c) for c in query.order_by(UnitConversion.id).all()]


def _load_recipe_inputs(
    sess: Session, recipe_id: int
) -> Tuple[Recipe, List[RecipeIngredientLine], List[CustomUnitConversion]]:
    recipe = _get_recipe(sess, recipe_id)
    lines = [_to_line(ri) for ri in recipe.recipe_ingredients]
    item_ids = {line.inventory_item.id for line in lines if line.inventory_item is not None}
    conversions = _query_conversions(sess, item_ids)
    return recipe, lines, conversions


def get_recipe_ingredient_lines(
    recipe_id: int, session: Optional[Session] = None
) -> List[RecipeIngredientLine]:
    """
    Load a recipe's lines with their linked inventory pricing.

    Args:
        recipe_id: Recipe ID
        session: Optional database session

    Returns:
        Lines in stored order

    Raises:
        RecipeNotFound: If recipe_id does not exist
        DatabaseError: If the database query fails
    """

    def _impl(sess: Session) -> List[RecipeIngredientLine]:
        return [_to_line(ri) for ri in _get_recipe(sess, recipe_id).recipe_ingredients]

    return _run(session, _impl, "get_recipe_ingredient_lines")


def get_unit_conversions(
    inventory_item_ids: Optional[Iterable[int]] = None, session: Optional[Session] = None
) -> List[CustomUnitConversion]:
    """
    Load custom unit conversions as an immutable snapshot.

    Args:
        inventory_item_ids: Restrict to these items; None loads every conversion
        session: Optional database session

    Returns:
        Conversions ordered by creation (first match wins in the engine)
    """
    return _run(
        session, lambda sess: _query_conversions(sess, inventory_item_ids), "get_unit_conversions"
    )


# ============================================================================
# Costing
# ============================================================================


def calculate_recipe_cost(recipe_id: int, session: Optional[Session] = None) -> Decimal:
    """
    Calculate the total cost of a stored recipe.

    Lines with unresolved unit mismatches contribute zero; use
    get_recipe_cost_breakdown() or check_recipe_units() before trusting the total.

    Args:
        recipe_id: Recipe ID
        session: Optional database session

    Returns:
        Decimal total cost

    Raises:
        RecipeNotFound: If recipe_id does not exist
        DatabaseError: If the database query fails
    """

    def _impl(sess: Session) -> Decimal:
        _, lines, conversions = _load_recipe_inputs(sess, recipe_id)
        total = recipe_cost_calculator.calculate_recipe_cost(lines, conversions)
        log_operation(
            logger,
            operation="calculate_recipe_cost",
            outcome="success",
            recipe_id=recipe_id,
            total_cost=str(total),
        )
        return total

    return _run(session, _impl, "calculate_recipe_cost")


def get_recipe_cost_breakdown(
    recipe_id: int, session: Optional[Session] = None
) -> RecipeCostBreakdown:
    """
    Calculate a stored recipe's cost with per-line results and unresolved mismatches.

    Args:
        recipe_id: Recipe ID
        session: Optional database session

    Returns:
        RecipeCostBreakdown

    Raises:
        RecipeNotFound: If recipe_id does not exist
        DatabaseError: If the database query fails
    """

    def _impl(sess: Session) -> RecipeCostBreakdown:
        _, lines, conversions = _load_recipe_inputs(sess, recipe_id)
        breakdown = recipe_cost_calculator.calculate_recipe_cost_detailed(lines, conversions)
        _log_breakdown(recipe_id, breakdown)
        return breakdown

    return _run(session, _impl, "get_recipe_cost_breakdown")


def _log_breakdown(recipe_id: int, breakdown: RecipeCostBreakdown) -> None:
    if breakdown.has_mismatches:
        log_operation(
            logger,
            operation="get_recipe_cost_breakdown",
            outcome="unit_mismatch",
            level=logging.WARNING,
            recipe_id=recipe_id,
            total_cost=str(breakdown.total_cost),
            mismatched_items=[m.inventory_item_name for m in breakdown.mismatches],
        )
    else:
        log_operation(
            logger,
            operation="get_recipe_cost_breakdown",
            outcome="success",
            recipe_id=recipe_id,
            total_cost=str(breakdown.total_cost),
        )


def get_recipe_cost_summary(recipe_id: int, session: Optional[Session] = None) -> Dict[str, Any]:
    """
    Build a display-ready cost summary for a stored recipe.

    Includes the breakdown, formatted amounts in the configured currency,
    cost per serving and food cost percentage against the retail price when
    servings and retail price are set.

    Args:
        recipe_id: Recipe ID
        session: Optional database session

    Returns:
        Dictionary with recipe identity, totals, per-line entries and mismatches

    Raises:
        RecipeNotFound: If recipe_id does not exist
        DatabaseError: If the database query fails
    """
    config = get_config()
    symbol = config.currency_symbol
    decimals = config.currency_decimals

    def _impl(sess: Session) -> Dict[str, Any]:
        recipe, lines, conversions = _load_recipe_inputs(sess, recipe_id)
        breakdown = recipe_cost_calculator.calculate_recipe_cost_detailed(lines, conversions)
        _log_breakdown(recipe_id, breakdown)

        cost_per_serving = recipe_cost_calculator.calculate_cost_per_serving(
            breakdown.total_cost, recipe.servings
        )
        food_cost_percentage = None
        if cost_per_serving is not None:
            food_cost_percentage = recipe_cost_calculator.calculate_food_cost_percentage(
                cost_per_serving, recipe.retail_price
            )

        line_entries = []
        for entry in breakdown.ingredient_costs:
            item = entry.line.inventory_item
            used = entry.result.used_conversion
            line_entries.append(
                {
                    "name": entry.line.name,
                    "quantity": entry.line.quantity,
                    "unit": entry.line.unit,
                    "inventory_item_id": item.id if item is not None else None,
                    "inventory_item_name": item.name if item is not None else None,
                    "cost": entry.cost,
                    "formatted_cost": recipe_cost_calculator.format_currency(
                        entry.cost, symbol, decimals
                    ),
                    "status": entry.result.status.value,
                    "has_unit_mismatch": entry.has_unit_mismatch,
                    "used_conversion_id": used.id if used is not None else None,
                }
            )

        return {
            "recipe_id": recipe.id,
            "recipe_name": recipe.name,
            "total_cost": breakdown.total_cost,
            "formatted_total": recipe_cost_calculator.format_currency(
                breakdown.total_cost, symbol, decimals
            ),
            "cost_per_serving": cost_per_serving,
            "formatted_cost_per_serving": (
                recipe_cost_calculator.format_currency(cost_per_serving, symbol, decimals)
                if cost_per_serving is not None
                else None
            ),
            "food_cost_percentage": food_cost_percentage,
            "lines": line_entries,
            "mismatches": list(breakdown.mismatches),
            "linked_count": breakdown.linked_count,
            "total_ingredients": breakdown.total_ingredients,
            "is_complete": breakdown.is_complete,
        }

    return _run(session, _impl, "get_recipe_cost_summary")


def check_recipe_units(
    recipe_id: int, session: Optional[Session] = None
) -> List[UnitMismatchWarning]:
    """
    Scan a stored recipe for unit mismatches before saving or costing it.

    Args:
        recipe_id: Recipe ID
        session: Optional database session

    Returns:
        All warnings, including lines resolved by a custom conversion
        (can_convert True) and lines that cannot be costed (can_convert False)

    Raises:
        RecipeNotFound: If recipe_id does not exist
        DatabaseError: If the database query fails
    """

    def _impl(sess: Session) -> List[UnitMismatchWarning]:
        _, lines, conversions = _load_recipe_inputs(sess, recipe_id)
        warnings = recipe_cost_calculator.detect_unit_mismatches(lines, conversions)
        unresolved = [w.inventory_item_name for w in warnings if not w.can_convert]
        log_operation(
            logger,
            operation="check_recipe_units",
            outcome="unit_mismatch" if unresolved else "success",
            level=logging.WARNING if unresolved else logging.INFO,
            recipe_id=recipe_id,
            mismatched_items=unresolved,
        )
        return warnings

    return _run(session, _impl, "check_recipe_units")


# ============================================================================
# Custom Unit Conversions
# ============================================================================


def _validate_conversion(
    recipe_unit: str, inventory_unit: str, conversion_factor: Any
) -> Tuple[str, str, Decimal]:
    errors = []

    norm_recipe = normalize_unit(recipe_unit)
    norm_inventory = normalize_unit(inventory_unit)

    if not norm_recipe:
        errors.append("Recipe unit is required")
    elif len(norm_recipe) > MAX_UNIT_LENGTH:
        errors.append(f"Recipe unit must be at most {MAX_UNIT_LENGTH} characters")
    if not norm_inventory:
        errors.append("Inventory unit is required")
    elif len(norm_inventory) > MAX_UNIT_LENGTH:
        errors.append(f"Inventory unit must be at most {MAX_UNIT_LENGTH} characters")

    if norm_recipe and norm_inventory:
        if norm_recipe == norm_inventory:
            errors.append("Recipe unit and inventory unit must differ")
        elif get_standard_conversion_factor(norm_recipe, norm_inventory) is not None:
            errors.append(
                f"A standard conversion already exists between {norm_recipe} and {norm_inventory}"
            )

    factor = parse_decimal(conversion_factor)
    if factor is None:
        errors.append("Conversion factor must be a number")
    elif factor <= 0:
        errors.append("Conversion factor must be positive")
    elif factor > MAX_CONVERSION_FACTOR:
        errors.append("Conversion factor is unreasonably large")

    if errors:
        raise ValidationError(errors)

    return norm_recipe, norm_inventory, factor


def create_unit_conversion(
    inventory_item_id: int,
    recipe_unit: str,
    inventory_unit: str,
    conversion_factor: Any,
    notes: Optional[str] = None,
    session: Optional[Session] = None,
) -> CustomUnitConversion:
    """
    Create a custom conversion: 1 recipe_unit = conversion_factor inventory_units.

    Units are stored in canonical form so later lookups match regardless of
    spelling.

    Args:
        inventory_item_id: Inventory item the conversion applies to
        recipe_unit: Unit used by recipes (e.g., "g")
        inventory_unit: Purchase unit of the item (e.g., "unit")
        conversion_factor: Inventory units per recipe unit (e.g., "0.002")
        notes: Optional notes
        session: Optional database session

    Returns:
        The created conversion

    Raises:
        ValidationError: If units or factor are invalid
        InventoryItemNotFound: If the item does not exist
        DuplicateUnitConversion: If the item already has this unit pair
        DatabaseError: If the database operation fails
    """
    norm_recipe, norm_inventory, factor = _validate_conversion(
        recipe_unit, inventory_unit, conversion_factor
    )

    def _impl(sess: Session) -> CustomUnitConversion:
        if sess.get(InventoryItem, inventory_item_id) is None:
            raise InventoryItemNotFound(inventory_item_id)

        existing = (
            sess.query(UnitConversion)
            .filter(
                UnitConversion.inventory_item_id == inventory_item_id,
                UnitConversion.recipe_unit == norm_recipe,
                UnitConversion.inventory_unit == norm_inventory,
            )
            .first()
        )
        if existing is not None:
            raise DuplicateUnitConversion(inventory_item_id, norm_recipe, norm_inventory)

        conversion = UnitConversion(
            inventory_item_id=inventory_item_id,
            recipe_unit=norm_recipe,
            inventory_unit=norm_inventory,
            conversion_factor=str(factor),
            notes=notes,
        )
        sess.add(conversion)
        sess.flush()

        log_operation(
            logger,
            operation="create_unit_conversion",
            outcome="success",
            conversion_id=conversion.id,
            inventory_item_id=inventory_item_id,
            recipe_unit=norm_recipe,
            inventory_unit=norm_inventory,
            conversion_factor=str(factor),
        )
        return _to_custom_conversion(conversion)

    return _run(session, _impl, "create_unit_conversion")


def delete_unit_conversion(conversion_id: int, session: Optional[Session] = None) -> bool:
    """
    Delete a custom conversion.

    Args:
        conversion_id: Conversion ID
        session: Optional database session

    Returns:
        True when deleted

    Raises:
        UnitConversionNotFound: If the conversion does not exist
        DatabaseError: If the database operation fails
    """

    def _impl(sess: Session) -> bool:
        conversion = sess.get(UnitConversion, conversion_id)
        if conversion is None:
            raise UnitConversionNotFound(conversion_id)
        sess.delete(conversion)
        sess.flush()
        log_operation(
            logger,
            operation="delete_unit_conversion",
            outcome="success",
            conversion_id=conversion_id,
        )
        return True

    return _run(session, _impl, "delete_unit_conversion")


def suggest_unit_conversion(
    inventory_item_id: int, recipe_unit: str, session: Optional[Session] = None
) -> Optional[Decimal]:
    """
    Suggest a factor for converting recipe_unit into a stored item's purchase unit.

    Args:
        inventory_item_id: Inventory item ID
        recipe_unit: Unit the recipe uses
        session: Optional database session

    Returns:
        Suggested factor, or None when the heuristic has nothing to offer

    Raises:
        InventoryItemNotFound: If the item does not exist
    """

    def _impl(sess: Session) -> Optional[Decimal]:
        item = sess.get(InventoryItem, inventory_item_id)
        if item is None:
            raise InventoryItemNotFound(inventory_item_id)
        return recipe_cost_calculator.suggest_conversion_factor(
            recipe_unit, item.purchase_unit, item.name
        )

    return _run(session, _impl, "suggest_unit_conversion")
