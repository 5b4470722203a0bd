"""
Recipe cost calculation from linked inventory pricing.

Pure functions with no database access. Callers pass recipe lines, each
linked to an inventory purchase record, plus an optional snapshot of
item-scoped custom unit conversions.

Unit resolution order for each line:
1. Identical units after normalization (factor 1)
2. Standard physical conversion table (recipe unit -> inventory unit)
3. Custom conversion for the same inventory item, recipe unit -> inventory unit
4. Otherwise a unit mismatch: the line costs zero and is reported

Malformed data never raises. An incomplete line is worth nothing and is not
reported as a mismatch; a mismatched line is forced to zero so a recipe total
is always a lower bound, never an overcount.
"""

import logging
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Any, Iterable, List, Optional, Sequence, Union

from recipe_costing.services.dto import (
    CostCalculationResult,
    CostPreview,
    CostStatus,
    CustomUnitConversion,
    IngredientCost,
    RecipeCostBreakdown,
    RecipeIngredientLine,
    UnitMismatchWarning,
)
from recipe_costing.services.logging_utils import get_service_logger, log_operation
from recipe_costing.services.quantity_parser import ZERO, parse_decimal, parse_quantity
from recipe_costing.services.unit_converter import (
    get_standard_conversion_factor,
    get_unit_type,
    normalize_unit,
)
from recipe_costing.utils.constants import (
    BASE_UNIT_BY_TYPE,
    CONTAINER_PORTION_UNITS,
    COST_PER_UNIT_PRECISION,
    DEFAULT_CURRENCY_DECIMALS,
    DEFAULT_CURRENCY_SYMBOL,
    DEFAULT_PORTION_UNIT,
    DEFAULT_UNIT_VOLUME_ML,
    DEFAULT_UNIT_WEIGHT_G,
    UNIT_WEIGHT_SUGGESTIONS,
)

logger = get_service_logger(__name__)

Conversions = Iterable[CustomUnitConversion]
Amount = Union[Decimal, int, float, str]


# ============================================================================
# Custom Conversion Lookup
# ============================================================================


def _same_item(left: Any, right: Any) -> bool:
    if left is None or right is None:
        return False
    return str(left) == str(right)


def find_custom_conversion(
    inventory_item_id: Any,
    recipe_unit: str,
    inventory_unit: str,
    custom_conversions: Conversions = (),
) -> Optional[CustomUnitConversion]:
    """
    Find the custom conversion for one item and one recipe -> inventory unit pair.

    Matching is directional: a conversion authored inventory -> recipe does not
    match. Conversions whose factor is not a positive number are ignored.
    The first match wins when duplicates exist.

    Args:
        inventory_item_id: Inventory item the line is linked to
        recipe_unit: Unit used by the recipe line
        inventory_unit: Purchase unit of the inventory item
        custom_conversions: Conversion snapshot to search

    Returns:
        Matching conversion, or None
    """
    norm_recipe = normalize_unit(recipe_unit)
    norm_inventory = normalize_unit(inventory_unit)

    for conversion in custom_conversions:
        if not _same_item(conversion.inventory_item_id, inventory_item_id):
            continue
        if normalize_unit(conversion.recipe_unit) != norm_recipe:
            continue
        if normalize_unit(conversion.inventory_unit) != norm_inventory:
            continue
        factor = parse_decimal(conversion.conversion_factor)
        if factor is None or factor <= 0:
            continue
        return conversion

    return None


# ============================================================================
# Single Line Costing
# ============================================================================


def calculate_ingredient_cost_with_conversion(
    ingredient: RecipeIngredientLine,
    custom_conversions: Conversions = (),
) -> CostCalculationResult:
    """
    Calculate the cost of a single recipe line with optional unit conversion.

    Formula: cost = (purchase_price / purchase_quantity) × (recipe_quantity × factor)

    Args:
        ingredient: Recipe line with its linked inventory record
        custom_conversions: Item-scoped custom conversions

    Returns:
        CostCalculationResult; cost is zero for unlinked, incomplete and
        mismatched lines, and status tells those cases apart
    """
    item = ingredient.inventory_item
    if item is None:
        return CostCalculationResult(cost=ZERO, status=CostStatus.UNLINKED)

    recipe_quantity = parse_quantity(ingredient.quantity)
    purchase_quantity = parse_quantity(item.purchase_quantity)
    purchase_price = parse_decimal(item.purchase_price)

    if recipe_quantity == 0 or purchase_quantity == 0 or purchase_price is None or purchase_price < 0:
        return CostCalculationResult(cost=ZERO, status=CostStatus.INCOMPLETE)

    recipe_unit = normalize_unit(ingredient.unit)
    inventory_unit = normalize_unit(item.purchase_unit)

    used_conversion = None
    conversion_factor = get_standard_conversion_factor(recipe_unit, inventory_unit)

    if conversion_factor is None:
        used_conversion = find_custom_conversion(
            item.id, recipe_unit, inventory_unit, custom_conversions
        )
        if used_conversion is None:
            log_operation(
                logger,
                operation="calculate_ingredient_cost",
                outcome="unit_mismatch",
                level=logging.DEBUG,
                inventory_item_id=item.id,
                recipe_unit=recipe_unit,
                inventory_unit=inventory_unit,
            )
            return CostCalculationResult(
                cost=ZERO, has_unit_mismatch=True, status=CostStatus.UNIT_MISMATCH
            )
        conversion_factor = parse_decimal(used_conversion.conversion_factor)

    cost_per_unit = purchase_price / purchase_quantity
    converted_quantity = recipe_quantity * conversion_factor

    return CostCalculationResult(
        cost=cost_per_unit * converted_quantity,
        used_conversion=used_conversion,
        conversion_factor=conversion_factor,
    )


def calculate_ingredient_cost(ingredient: RecipeIngredientLine) -> Decimal:
    """
    Calculate the cost of a single recipe line without custom conversions.

    Args:
        ingredient: Recipe line with its linked inventory record

    Returns:
        Line cost (zero when it cannot be costed)
    """
    return calculate_ingredient_cost_with_conversion(ingredient).cost


# ============================================================================
# Aggregation
# ============================================================================


def calculate_recipe_cost(
    ingredients: Iterable[RecipeIngredientLine],
    custom_conversions: Conversions = (),
) -> Decimal:
    """
    Calculate the total cost of a recipe.

    Mismatched lines contribute zero, so the total is a lower bound whenever
    mismatches exist.

    Args:
        ingredients: Recipe lines with inventory data
        custom_conversions: Item-scoped custom conversions

    Returns:
        Total cost in the currency of the purchase prices
    """
    conversions = tuple(custom_conversions)
    total = ZERO
    for ingredient in ingredients:
        total += calculate_ingredient_cost_with_conversion(ingredient, conversions).cost
    return total


def calculate_cost_breakdown(
    ingredients: Iterable[RecipeIngredientLine],
    custom_conversions: Conversions = (),
) -> List[IngredientCost]:
    """
    Cost every recipe line individually.

    Args:
        ingredients: Recipe lines with inventory data
        custom_conversions: Item-scoped custom conversions

    Returns:
        One IngredientCost per line, in input order
    """
    conversions = tuple(custom_conversions)
    return [
        IngredientCost(
            line=ingredient,
            result=calculate_ingredient_cost_with_conversion(ingredient, conversions),
        )
        for ingredient in ingredients
    ]


def calculate_recipe_cost_detailed(
    ingredients: Iterable[RecipeIngredientLine],
    custom_conversions: Conversions = (),
) -> RecipeCostBreakdown:
    """
    Calculate recipe cost with per-line results and unresolved mismatches.

    Lines resolved through a custom conversion are not listed as mismatches.

    Args:
        ingredients: Recipe lines with inventory data
        custom_conversions: Item-scoped custom conversions

    Returns:
        RecipeCostBreakdown
    """
    lines = tuple(ingredients)
    conversions = tuple(custom_conversions)

    ingredient_costs = tuple(calculate_cost_breakdown(lines, conversions))
    total_cost = sum((entry.cost for entry in ingredient_costs), ZERO)
    mismatches = tuple(
        warning for warning in detect_unit_mismatches(lines, conversions) if not warning.can_convert
    )

    return RecipeCostBreakdown(
        total_cost=total_cost,
        ingredient_costs=ingredient_costs,
        mismatches=mismatches,
        linked_count=sum(1 for line in lines if line.inventory_item is not None),
        total_ingredients=len(lines),
    )


# ============================================================================
# Mismatch Detection
# ============================================================================


def detect_unit_mismatches(
    ingredients: Iterable[RecipeIngredientLine],
    custom_conversions: Conversions = (),
) -> List[UnitMismatchWarning]:
    """
    Detect recipe lines whose unit differs from their inventory unit.

    Only units are inspected; quantities and prices may be invalid. Lines
    with identical or standard-convertible units, and unlinked lines, emit
    nothing.

    Args:
        ingredients: Recipe lines with inventory data
        custom_conversions: Item-scoped custom conversions

    Returns:
        Warnings; can_convert is True when a custom conversion resolves the line
    """
    conversions = tuple(custom_conversions)
    warnings = []

    for ingredient in ingredients:
        item = ingredient.inventory_item
        if item is None:
            continue

        recipe_unit = normalize_unit(ingredient.unit)
        inventory_unit = normalize_unit(item.purchase_unit)

        if get_standard_conversion_factor(recipe_unit, inventory_unit) is not None:
            continue

        conversion = find_custom_conversion(item.id, recipe_unit, inventory_unit, conversions)
        warnings.append(
            UnitMismatchWarning(
                ingredient_name=item.name,
                recipe_unit=ingredient.unit,
                inventory_unit=item.purchase_unit,
                inventory_item_id=item.id,
                inventory_item_name=item.name,
                can_convert=conversion is not None,
                conversion=conversion,
            )
        )

    return warnings


# ============================================================================
# Suggestions
# ============================================================================


def suggest_conversion_factor(
    from_unit: str, to_unit: str, item_name: Optional[str]
) -> Optional[Decimal]:
    """
    Suggest a starting factor for a user-authored custom conversion.

    Best effort only; suggestions never take part in cost calculation.
    Covers count units converted to grams (typical portion weights by item
    name) and count units converted to milliliters.

    Args:
        from_unit: Unit being converted from (e.g., "each")
        to_unit: Unit being converted to (e.g., "g")
        item_name: Inventory item name (e.g., "Ham Leg")

    Returns:
        Suggested factor, or None for any other unit pair
    """
    norm_from = normalize_unit(from_unit)
    norm_to = normalize_unit(to_unit)

    if norm_from == "unit" and norm_to == "g":
        lower_name = (item_name or "").lower()
        for keywords, grams in UNIT_WEIGHT_SUGGESTIONS:
            if any(keyword in lower_name for keyword in keywords):
                return grams
        return DEFAULT_UNIT_WEIGHT_G

    if norm_from == "unit" and norm_to == "ml":
        return DEFAULT_UNIT_VOLUME_ML

    return None


def suggest_portion_unit(container_unit: str) -> str:
    """Portion unit a container purchase unit is usually broken into (box -> piece)."""
    return CONTAINER_PORTION_UNITS.get((container_unit or "").lower().strip(), DEFAULT_PORTION_UNIT)


# ============================================================================
# Recipe-Level Figures
# ============================================================================


def calculate_cost_per_serving(total_cost: Decimal, servings: Any) -> Optional[Decimal]:
    """
    Divide a recipe total by its serving count.

    Returns:
        Cost per serving, or None when servings is missing or not positive
    """
    serving_count = parse_quantity(servings)
    if serving_count == 0:
        return None
    return Decimal(total_cost) / serving_count


def calculate_food_cost_percentage(cost_per_serving: Decimal, retail_price: Any) -> Optional[Decimal]:
    """
    Express a serving cost as a percentage of its retail price.

    Returns:
        Percentage (e.g., Decimal("28.5")), or None when the price is missing or not positive
    """
    price = parse_decimal(retail_price)
    if price is None or price <= 0:
        return None
    return Decimal(cost_per_serving) / price * 100


# ============================================================================
# Presentation
# ============================================================================


def _to_decimal(amount: Amount) -> Decimal:
    if isinstance(amount, Decimal):
        return amount
    return Decimal(str(amount))


def format_currency(
    amount: Amount,
    currency_symbol: str = DEFAULT_CURRENCY_SYMBOL,
    decimals: int = DEFAULT_CURRENCY_DECIMALS,
) -> str:
    """
    Format a cost value for display.

    Rounds half up at display time only; stored values are never rounded.

    Args:
        amount: Cost amount
        currency_symbol: Currency symbol to prefix
        decimals: Decimal places

    Returns:
        Formatted currency string (e.g., "$12.50")
    """
    value = _to_decimal(amount)
    quantum = Decimal(1).scaleb(-decimals)
    with localcontext() as ctx:
        # quantize needs room for every integer digit plus the decimals
        ctx.prec = max(ctx.prec, value.adjusted() + decimals + 2)
        rounded = value.quantize(quantum, rounding=ROUND_HALF_UP)
    return f"{currency_symbol}{rounded:f}"


def format_cost_per_unit(cost: Amount, currency_symbol: str = DEFAULT_CURRENCY_SYMBOL) -> str:
    """
    Format a small per-unit cost with enough decimal places to be meaningful.

    Args:
        cost: Cost of one unit (e.g., 0.012 for $0.012/g)
        currency_symbol: Currency symbol to prefix

    Returns:
        Formatted string: 5 places under 0.001, 4 under 0.01, 3 under 0.1, else 2
    """
    value = _to_decimal(cost)
    for upper_bound, decimals in COST_PER_UNIT_PRECISION:
        if value < upper_bound:
            return format_currency(value, currency_symbol, decimals)
    return format_currency(value, currency_symbol, DEFAULT_CURRENCY_DECIMALS)


def get_cost_preview(
    purchase_quantity: Any, purchase_unit: str, purchase_price: Any
) -> Optional[CostPreview]:
    """
    Compute the price per base unit of an inventory purchase.

    Weight units are expressed per gram and volume units per milliliter using
    the standard table; other units are priced per themselves.

    Args:
        purchase_quantity: Amount in one purchase (e.g., "1")
        purchase_unit: Purchase unit (e.g., "kg")
        purchase_price: Price of one purchase (e.g., "12.00")

    Returns:
        CostPreview (e.g., 0.012 per "g"), or None when inputs are incomplete or zero
    """
    quantity = parse_quantity(purchase_quantity)
    price = parse_decimal(purchase_price)
    if quantity == 0 or not price or price < 0 or not (purchase_unit or "").strip():
        return None

    display_unit = normalize_unit(purchase_unit)
    base_unit = BASE_UNIT_BY_TYPE.get(get_unit_type(display_unit))
    if base_unit is not None:
        quantity = quantity * get_standard_conversion_factor(display_unit, base_unit)
        display_unit = base_unit

    return CostPreview(cost_per_unit=price / quantity, display_unit=display_unit)


def summarize_mismatches(mismatches: Sequence[UnitMismatchWarning]) -> List[str]:
    """
    Describe mismatches as short user-facing messages.

    Returns:
        One message per warning (e.g., "Ham Leg: recipe uses 'g', inventory uses 'unit'")
    """
    messages = []
    for warning in mismatches:
        message = (
            f"{warning.inventory_item_name}: recipe uses '{warning.recipe_unit}', "
            f"inventory uses '{warning.inventory_unit}'"
        )
        if warning.can_convert and warning.conversion is not None:
            message += f" (custom factor {warning.conversion.conversion_factor})"
        messages.append(message)
    return messages
