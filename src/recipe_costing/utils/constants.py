"""
Constants for the Recipe Costing application.

This module defines all system-wide constants including:
- Application metadata
- Unit aliases and canonical units
- Standard physical conversion factors
- Quantity fraction glyphs
- Conversion suggestion rules
- Validation limits
"""

from decimal import Decimal
from typing import Dict, List, Tuple

# ============================================================================
# Application Metadata
# ============================================================================

APP_NAME = "Recipe Costing"
APP_VERSION = "0.1.0"
DATABASE_FILENAME = "recipe_costing.db"
DATABASE_VERSION = "1.0"

# ============================================================================
# Units
# ============================================================================

# Canonical unit -> accepted spellings (lowercase). Every canonical unit is
# listed as an alias of itself.
UNIT_ALIASES: Dict[str, List[str]] = {
    "g": ["g", "gr", "gram", "grams", "gm"],
    "kg": ["kg", "kilo", "kilogram", "kilograms"],
    "ml": ["ml", "milliliter", "millilitre", "milliliters", "millilitres"],
    "l": ["l", "liter", "litre", "liters", "litres"],
    "unit": ["unit", "units", "ea", "each", "piece", "pieces", "pc", "pcs"],
    "cup": ["cup", "cups", "c"],
    "tbsp": ["tbsp", "tablespoon", "tablespoons", "tbs"],
    "tsp": ["tsp", "teaspoon", "teaspoons"],
    "oz": ["oz", "ounce", "ounces"],
    "lb": ["lb", "lbs", "pound", "pounds"],
    "bunch": ["bunch", "bunches"],
    "head": ["head", "heads"],
    "clove": ["clove", "cloves"],
    "can": ["can", "cans", "tin", "tins"],
    "bottle": ["bottle", "bottles"],
    "jar": ["jar", "jars"],
    "pack": ["pack", "packs", "packet", "packets"],
    "box": ["box", "boxes"],
    "bag": ["bag", "bags"],
    "slice": ["slice", "slices"],
}

CANONICAL_UNITS: List[str] = list(UNIT_ALIASES)

# Unit type mappings for canonical units
UNIT_TYPE_MAP: Dict[str, str] = {
    # Weight
    "g": "weight",
    "kg": "weight",
    "oz": "weight",
    "lb": "weight",
    # Volume
    "ml": "volume",
    "l": "volume",
    "cup": "volume",
    "tbsp": "volume",
    "tsp": "volume",
    # Count
    "unit": "count",
    "bunch": "count",
    "head": "count",
    "clove": "count",
    "slice": "count",
    # Package
    "can": "package",
    "bottle": "package",
    "jar": "package",
    "pack": "package",
    "box": "package",
    "bag": "package",
}

# ============================================================================
# Standard Conversion Table
# ============================================================================

# from_unit -> {to_unit: factor}, meaning 1 from_unit = factor to_units.
# One hop only. Each unit pair is listed once, from the larger unit; the
# other direction is always the reciprocal of that entry.
STANDARD_CONVERSIONS: Dict[str, Dict[str, Decimal]] = {
    "kg": {"g": Decimal("1000")},
    "l": {"ml": Decimal("1000")},
    "oz": {"g": Decimal("28.3495")},
    "lb": {"oz": Decimal("16"), "kg": Decimal("0.453592"), "g": Decimal("453.592")},
    "cup": {"ml": Decimal("236.588"), "l": Decimal("0.236588")},
    "tbsp": {"tsp": Decimal("3"), "ml": Decimal("14.787")},
    "tsp": {"ml": Decimal("4.929")},
}

# Base unit used for per-unit price previews
BASE_UNIT_BY_TYPE: Dict[str, str] = {
    "weight": "g",
    "volume": "ml",
}

# ============================================================================
# Quantities
# ============================================================================

FRACTION_GLYPHS: Dict[str, Decimal] = {
    "¼": Decimal("0.25"),
    "½": Decimal("0.5"),
    "¾": Decimal("0.75"),
    "⅓": Decimal("0.333"),
    "⅔": Decimal("0.667"),
    "⅛": Decimal("0.125"),
    "⅜": Decimal("0.375"),
    "⅝": Decimal("0.625"),
    "⅞": Decimal("0.875"),
}

# ============================================================================
# Conversion Suggestions
# ============================================================================

# (item name substrings, grams per unit). First matching rule wins.
UNIT_WEIGHT_SUGGESTIONS: List[Tuple[Tuple[str, ...], Decimal]] = [
    (("ham", "meat"), Decimal("100")),
    (("cheese",), Decimal("50")),
    (("butter",), Decimal("20")),
    (("egg",), Decimal("60")),
    (("onion",), Decimal("150")),
    (("garlic",), Decimal("5")),
    (("lemon", "lime"), Decimal("50")),
]
DEFAULT_UNIT_WEIGHT_G = Decimal("100")
DEFAULT_UNIT_VOLUME_ML = Decimal("250")

# Container purchase unit -> portion unit it is usually broken into
CONTAINER_PORTION_UNITS: Dict[str, str] = {
    "loaf": "slice",
    "loaves": "slice",
    "slab": "slice",
    "slabs": "slice",
    "box": "piece",
    "boxes": "piece",
    "pack": "piece",
    "packs": "piece",
    "packet": "piece",
    "packets": "piece",
    "bunch": "stem",
    "bunches": "stem",
    "tray": "piece",
    "trays": "piece",
    "roll": "slice",
    "rolls": "slice",
    "wheel": "wedge",
    "wheels": "wedge",
    "block": "slice",
    "blocks": "slice",
    "case": "bottle",
    "cases": "bottle",
    "ctn": "piece",
    "carton": "piece",
    "cartons": "piece",
}
DEFAULT_PORTION_UNIT = "piece"

# ============================================================================
# Currency Display
# ============================================================================

DEFAULT_CURRENCY_SYMBOL = "$"
DEFAULT_CURRENCY_DECIMALS = 2

# (upper bound, decimals) for sub-cent per-unit costs, checked in order
COST_PER_UNIT_PRECISION: List[Tuple[Decimal, int]] = [
    (Decimal("0.001"), 5),
    (Decimal("0.01"), 4),
    (Decimal("0.1"), 3),
]

# ============================================================================
# Validation Limits
# ============================================================================

MAX_UNIT_LENGTH = 50
MAX_CONVERSION_FACTOR = Decimal("1e6")

# Parsed amounts must lie within 10**-MAX_DECIMAL_EXPONENT and
# 10**(MAX_DECIMAL_EXPONENT + 1); anything outside reads as unparseable.
MAX_DECIMAL_EXPONENT = 15
