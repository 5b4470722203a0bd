"""
Unit resolution for recipe costing.

This module provides:
- Unit normalization (free text -> canonical unit via the alias table)
- Unit type detection (weight, volume, count, package)
- Unit compatibility checks
- Standard conversion factors from the fixed physical conversion table

Conversion Strategy:
- The standard table is one hop only; factors are never chained
- Each unit pair is stored once; the other direction is the reciprocal of
  that entry, so factor(a, b) * factor(b, a) == 1
- No standard factor is a normal outcome (None), not an error
"""

from decimal import Decimal
from typing import Dict, Optional

from recipe_costing.utils.constants import (
    CANONICAL_UNITS,
    STANDARD_CONVERSIONS,
    UNIT_ALIASES,
    UNIT_TYPE_MAP,
)


def _build_alias_lookup() -> Dict[str, str]:
    lookup = {}
    for canonical, aliases in UNIT_ALIASES.items():
        for alias in aliases:
            lookup[alias] = canonical
    return lookup


# alias -> canonical unit
_ALIAS_LOOKUP: Dict[str, str] = _build_alias_lookup()


# ============================================================================
# Normalization
# ============================================================================


def normalize_unit(unit: Optional[str]) -> str:
    """
    Normalize a unit string to its canonical form.

    Unknown units are returned lowercased and trimmed, so this never fails;
    it may only fail to canonicalize.

    Args:
        unit: Unit text as entered (e.g., " Grams ", "tbs", "EA")

    Returns:
        Canonical unit (e.g., "g", "tbsp", "unit"), or the cleaned input
    """
    if unit is None:
        return ""
    cleaned = str(unit).lower().strip()
    return _ALIAS_LOOKUP.get(cleaned, cleaned)


def is_known_unit(unit: Optional[str]) -> bool:
    """Check whether a unit resolves to one of the canonical units."""
    return normalize_unit(unit) in CANONICAL_UNITS


def get_unit_type(unit: Optional[str]) -> str:
    """
    Determine the type of a unit.

    Args:
        unit: Unit string

    Returns:
        Unit type: "weight", "volume", "count", "package", or "unknown"
    """
    return UNIT_TYPE_MAP.get(normalize_unit(unit), "unknown")


# ============================================================================
# Standard Conversions
# ============================================================================


def get_standard_conversion_factor(from_unit: str, to_unit: str) -> Optional[Decimal]:
    """
    Get the standard conversion factor between two units, if available.

    The factor answers "how many to_units is one from_unit".

    Args:
        from_unit: Source unit (any alias)
        to_unit: Target unit (any alias)

    Returns:
        Decimal factor, or None when no standard conversion is known
    """
    norm_from = normalize_unit(from_unit)
    norm_to = normalize_unit(to_unit)

    if norm_from == norm_to:
        return Decimal("1")

    direct = STANDARD_CONVERSIONS.get(norm_from, {}).get(norm_to)
    if direct:
        return direct

    reverse = STANDARD_CONVERSIONS.get(norm_to, {}).get(norm_from)
    if reverse:
        return Decimal("1") / reverse

    return None


def are_units_compatible(unit1: str, unit2: str) -> bool:
    """
    Check if two units are the same or convertible through the standard table.

    Args:
        unit1: First unit
        unit2: Second unit

    Returns:
        True if the units can be compared for costing without a custom conversion
    """
    return get_standard_conversion_factor(unit1, unit2) is not None


def convert_standard_units(
    value: Decimal, from_unit: str, to_unit: str
) -> Optional[Decimal]:
    """
    Convert a quantity using the standard table.

    Args:
        value: Quantity in from_unit
        from_unit: Source unit
        to_unit: Target unit

    Returns:
        Quantity in to_unit, or None when no standard conversion is known
    """
    factor = get_standard_conversion_factor(from_unit, to_unit)
    if factor is None:
        return None
    return Decimal(value) * factor


def format_conversion(factor: Decimal, from_unit: str, to_unit: str, precision: int = 4) -> str:
    """
    Format a conversion factor for display.

    Args:
        factor: Units of to_unit in one from_unit
        from_unit: Source unit
        to_unit: Target unit
        precision: Decimal places

    Returns:
        Formatted string (e.g., "1 g = 0.0010 kg")
    """
    return f"1 {from_unit} = {factor:.{precision}f} {to_unit}"
