"""
Unit tests for unit resolution.

Tests cover:
- Unit normalization and aliases
- Unit type detection
- Standard conversion factors in both table directions
- Compatibility checks and conversion formatting
"""

from decimal import Decimal

import pytest

from recipe_costing.services.unit_converter import (
    are_units_compatible,
    convert_standard_units,
    format_conversion,
    get_standard_conversion_factor,
    get_unit_type,
    is_known_unit,
    normalize_unit,
)
from recipe_costing.utils.constants import STANDARD_CONVERSIONS, UNIT_ALIASES


# ============================================================================
# Normalization Tests
# ============================================================================


class TestNormalizeUnit:
    """Test free-text unit normalization."""

    def test_aliases_resolve_to_canonical(self):
        assert normalize_unit("grams") == "g"
        assert normalize_unit("Kilogram") == "kg"
        assert normalize_unit("tbs") == "tbsp"
        assert normalize_unit("each") == "unit"
        assert normalize_unit("EA") == "unit"
        assert normalize_unit("litres") == "l"

    def test_whitespace_and_case_are_ignored(self):
        assert normalize_unit("  Grams ") == "g"
        assert normalize_unit("CUPS") == "cup"

    def test_unknown_unit_is_cleaned_not_rejected(self):
        assert normalize_unit(" Pinch ") == "pinch"
        assert normalize_unit("handful") == "handful"

    def test_empty_and_none(self):
        assert normalize_unit("") == ""
        assert normalize_unit(None) == ""

    def test_every_alias_maps_to_its_canonical_unit(self):
        """Normalizing any listed spelling lands on its canonical unit."""
        for canonical, aliases in UNIT_ALIASES.items():
            for alias in aliases:
                assert normalize_unit(alias) == canonical

    def test_normalization_is_idempotent(self):
        for text in ["Grams", " each ", "TBS", "pinch", ""]:
            once = normalize_unit(text)
            assert normalize_unit(once) == once

    def test_is_known_unit(self):
        assert is_known_unit("Pounds")
        assert not is_known_unit("pinch")
        assert not is_known_unit(None)


# ============================================================================
# Unit Type Tests
# ============================================================================


class TestUnitType:
    """Test unit type detection."""

    def test_weight(self):
        for unit in ["g", "kilo", "oz", "lbs"]:
            assert get_unit_type(unit) == "weight"

    def test_volume(self):
        for unit in ["ml", "litre", "cups", "tablespoon", "tsp"]:
            assert get_unit_type(unit) == "volume"

    def test_count(self):
        for unit in ["each", "bunch", "head", "cloves", "slice"]:
            assert get_unit_type(unit) == "count"

    def test_package(self):
        for unit in ["tin", "bottle", "jar", "packet", "box", "bag"]:
            assert get_unit_type(unit) == "package"

    def test_unknown(self):
        assert get_unit_type("pinch") == "unknown"
        assert get_unit_type("") == "unknown"


# ============================================================================
# Standard Conversion Tests
# ============================================================================


class TestStandardConversionFactor:
    """Test one-hop lookups in the standard table."""

    def test_identical_units_factor_one(self):
        assert get_standard_conversion_factor("g", "g") == Decimal("1")
        assert get_standard_conversion_factor("grams", "G") == Decimal("1")
        assert get_standard_conversion_factor("pinch", "Pinch") == Decimal("1")

    def test_direct_entries(self):
        assert get_standard_conversion_factor("g", "kg") == Decimal("0.001")
        assert get_standard_conversion_factor("kg", "g") == Decimal("1000")
        assert get_standard_conversion_factor("lb", "oz") == Decimal("16")
        assert get_standard_conversion_factor("tbsp", "tsp") == Decimal("3")

    def test_aliases_are_accepted(self):
        assert get_standard_conversion_factor("grams", "kilograms") == Decimal("0.001")
        assert get_standard_conversion_factor("cups", "millilitres") == Decimal("236.588")

    def test_reverse_entry_is_inverted(self):
        """ml -> tbsp is not listed, so the reciprocal of tbsp -> ml is used."""
        assert "tbsp" not in STANDARD_CONVERSIONS.get("ml", {})
        factor = get_standard_conversion_factor("ml", "tbsp")
        assert factor == pytest.approx(Decimal("1") / Decimal("14.787"))

    def test_inverse_relation_for_derived_direction(self):
        forward = get_standard_conversion_factor("tbsp", "ml")
        backward = get_standard_conversion_factor("ml", "tbsp")
        assert forward * backward == pytest.approx(Decimal("1"))

    def test_each_pair_is_listed_once(self):
        for from_unit, targets in STANDARD_CONVERSIONS.items():
            for to_unit in targets:
                assert from_unit not in STANDARD_CONVERSIONS.get(to_unit, {})

    @pytest.mark.parametrize(
        "from_unit,to_unit",
        [
            (from_unit, to_unit)
            for from_unit, targets in STANDARD_CONVERSIONS.items()
            for to_unit in targets
        ],
    )
    def test_reverse_factor_is_reciprocal(self, from_unit, to_unit):
        forward = get_standard_conversion_factor(from_unit, to_unit)
        backward = get_standard_conversion_factor(to_unit, from_unit)
        assert forward == pytest.approx(Decimal("1") / backward, rel=Decimal("1e-20"))

    @pytest.mark.parametrize(
        "small,large",
        [("g", "oz"), ("tsp", "tbsp"), ("kg", "lb"), ("ml", "cup"), ("l", "cup")],
    )
    def test_small_to_large_agrees_with_large_to_small(self, small, large):
        """1 tsp is exactly a third of a tbsp, not 0.333 of one."""
        forward = get_standard_conversion_factor(small, large)
        backward = get_standard_conversion_factor(large, small)
        assert forward == pytest.approx(Decimal("1") / backward, rel=Decimal("1e-20"))
        assert forward * backward == pytest.approx(Decimal("1"), rel=Decimal("1e-20"))

    def test_no_chaining(self):
        """tsp -> cup would need two hops through ml; none is offered."""
        assert get_standard_conversion_factor("tsp", "cup") is None
        assert get_standard_conversion_factor("oz", "kg") is None

    def test_no_conversion_across_types(self):
        assert get_standard_conversion_factor("g", "ml") is None
        assert get_standard_conversion_factor("g", "unit") is None
        assert get_standard_conversion_factor("each", "g") is None


class TestCompatibilityAndConversion:
    """Test compatibility checks and value conversion."""

    def test_compatible_units(self):
        assert are_units_compatible("g", "kg")
        assert are_units_compatible("ml", "tbsp")
        assert are_units_compatible("pinch", "pinch")

    def test_incompatible_units(self):
        assert not are_units_compatible("g", "unit")
        assert not are_units_compatible("cup", "g")

    def test_convert_standard_units(self):
        assert convert_standard_units(Decimal("2"), "kg", "g") == Decimal("2000")
        assert convert_standard_units(Decimal("500"), "grams", "kg") == Decimal("0.500")

    def test_convert_without_standard_conversion(self):
        assert convert_standard_units(Decimal("1"), "g", "unit") is None

    def test_format_conversion(self):
        assert format_conversion(Decimal("0.001"), "g", "kg") == "1 g = 0.0010 kg"
        assert format_conversion(Decimal("16"), "lb", "oz", precision=0) == "1 lb = 16 oz"
