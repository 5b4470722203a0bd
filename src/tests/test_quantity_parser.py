"""
Unit tests for quantity parsing.

Tests cover:
- Plain decimals and lenient leading-number parsing
- Unicode and ASCII fractions
- Mixed numbers
- Invalid, empty and negative input
- Amounts of absurd magnitude
"""

from decimal import Decimal

import pytest

from recipe_costing.services.quantity_parser import parse_decimal, parse_quantity


class TestParseQuantity:
    """Test recipe quantity parsing."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("200", Decimal("200")),
            ("0.5", Decimal("0.5")),
            (" 12 ", Decimal("12")),
            (".25", Decimal("0.25")),
        ],
    )
    def test_plain_decimals(self, text, expected):
        assert parse_quantity(text) == expected

    @pytest.mark.parametrize(
        "glyph,expected",
        [
            ("¼", Decimal("0.25")),
            ("½", Decimal("0.5")),
            ("¾", Decimal("0.75")),
            ("⅓", Decimal("0.333")),
            ("⅔", Decimal("0.667")),
            ("⅛", Decimal("0.125")),
            ("⅜", Decimal("0.375")),
            ("⅝", Decimal("0.625")),
            ("⅞", Decimal("0.875")),
        ],
    )
    def test_unicode_fractions(self, glyph, expected):
        assert parse_quantity(glyph) == expected

    def test_ascii_fraction(self):
        assert parse_quantity("1/4") == Decimal("0.25")
        assert parse_quantity("3/2") == Decimal("1.5")
        assert parse_quantity("12/4") == Decimal("3")

    def test_ascii_fraction_with_spaces(self):
        assert parse_quantity("1 / 2") == Decimal("0.5")

    def test_mixed_number_with_glyph(self):
        assert parse_quantity("1 ½") == Decimal("1.5")
        assert parse_quantity("1½") == Decimal("1.5")
        assert parse_quantity("2 ¾") == Decimal("2.75")

    def test_mixed_number_with_ascii_fraction(self):
        assert parse_quantity("1 1/2") == Decimal("1.5")
        assert parse_quantity("2 1/4") == Decimal("2.25")

    def test_division_by_zero_is_zero(self):
        assert parse_quantity("3/0") == Decimal("0")
        assert parse_quantity("1 1/0") == Decimal("0")

    def test_lenient_leading_number(self):
        """A trailing unit or word is ignored, as a lenient numeric parse does."""
        assert parse_quantity("200g") == Decimal("200")
        assert parse_quantity("2 large") == Decimal("2")

    @pytest.mark.parametrize("text", ["", "   ", "abc", "a lot", "/", "½½", "-1", "-0.5"])
    def test_invalid_or_negative_is_zero(self, text):
        assert parse_quantity(text) == Decimal("0")

    def test_none_is_zero(self):
        assert parse_quantity(None) == Decimal("0")

    def test_numbers_are_accepted(self):
        assert parse_quantity(3) == Decimal("3")
        assert parse_quantity(0.5) == Decimal("0.5")
        assert parse_quantity(Decimal("1.25")) == Decimal("1.25")
        assert parse_quantity(-2) == Decimal("0")

    def test_result_is_never_negative(self):
        for text in ["-3", "-1/2", "1/-2", "-½"]:
            assert parse_quantity(text) >= 0

    @pytest.mark.parametrize(
        "text", ["9e999999", "1e-999999", "1e17", "1e-16", "1e999999/1", "1/1e-999999"]
    )
    def test_out_of_range_magnitude_is_zero(self, text):
        assert parse_quantity(text) == Decimal("0")

    def test_long_whole_number_in_mixed_form_is_zero(self):
        assert parse_quantity("9" * 40 + " ½") == Decimal("0")

    def test_range_edges_are_accepted(self):
        assert parse_quantity("1e-15") == Decimal("1e-15")
        assert parse_quantity("9.5e15") == Decimal("9.5e15")
        assert parse_quantity("0e999999") == Decimal("0")


class TestParseDecimal:
    """Test plain decimal parsing for prices and factors."""

    def test_valid(self):
        assert parse_decimal("12.00") == Decimal("12.00")
        assert parse_decimal(" 0.002 ") == Decimal("0.002")
        assert parse_decimal("-4") == Decimal("-4")
        assert parse_decimal(7) == Decimal("7")

    def test_leading_number(self):
        assert parse_decimal("12.50 AUD") == Decimal("12.50")

    def test_invalid(self):
        assert parse_decimal("") is None
        assert parse_decimal("free") is None
        assert parse_decimal(None) is None

    def test_non_finite(self):
        assert parse_decimal(Decimal("NaN")) is None
        assert parse_decimal(float("inf")) is None
        assert parse_decimal("inf") is None

    def test_out_of_range_magnitude(self):
        assert parse_decimal("1e999999") is None
        assert parse_decimal("-1e999999") is None
        assert parse_decimal("1e-999999") is None
        assert parse_decimal(Decimal("9e999999")) is None
        assert parse_decimal(10**400) is None
        assert parse_decimal(1e300) is None

    def test_large_but_plausible_values_are_kept(self):
        assert parse_decimal("1e7") == Decimal("10000000")
        assert parse_decimal("0.000001") == Decimal("0.000001")

    def test_zero_with_exponent_is_plain_zero(self):
        assert parse_decimal("0e999999") == Decimal("0")
        assert parse_decimal("0e999999").adjusted() == 0
