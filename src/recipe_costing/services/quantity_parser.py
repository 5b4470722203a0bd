"""
Quantity parsing for recipe and inventory amounts.

Recipe quantities are free text and may be written as:
- plain decimals: "200", "0.5"
- Unicode vulgar fractions: "½", "¾"
- ASCII fractions: "1/4"
- mixed numbers: "1 ½", "1½", "2 1/4"

Parsing never raises. Anything unparseable, empty, negative or of absurd
magnitude ("1e999999", "1e-999999") reads as zero, which the cost engine
treats as "no contribution". Keeping every parsed amount within
MAX_DECIMAL_EXPONENT also keeps the engine's arithmetic far from the
Decimal context limits.
"""

import re
from decimal import Decimal, InvalidOperation
from typing import Optional, Union

from recipe_costing.utils.constants import FRACTION_GLYPHS, MAX_DECIMAL_EXPONENT

QuantityInput = Union[str, int, float, Decimal, None]

ZERO = Decimal("0")

_GLYPHS = "".join(FRACTION_GLYPHS)

# Leading number, read the way a lenient numeric parse reads it ("200g" -> 200)
_LEADING_NUMBER = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")

# Whole number followed by a glyph ("1½", "1 ½") or a spaced ASCII fraction ("1 1/2")
_MIXED_NUMBER = re.compile(rf"^(\d+)(?:\s*([{_GLYPHS}])|\s+(\d+)\s*/\s*(\d+))$")


def _bounded(value: Optional[Decimal]) -> Optional[Decimal]:
    """Drop non-finite values and values outside the supported magnitude."""
    if value is None or not value.is_finite():
        return None
    if value.is_zero():
        return ZERO
    if abs(value.adjusted()) > MAX_DECIMAL_EXPONENT:
        return None
    return value


def parse_decimal(value: QuantityInput) -> Optional[Decimal]:
    """
    Parse a plain decimal such as a price or conversion factor.

    Args:
        value: Text or number (e.g., "12.00", " 0.5 ", 3)

    Returns:
        Decimal value, or None when the input has no leading number, is not
        finite or its magnitude is outside 1e-15 .. 1e16
    """
    if value is None:
        return None
    if isinstance(value, Decimal):
        return _bounded(value)
    if isinstance(value, int):
        return _bounded(Decimal(value))
    if isinstance(value, float):
        return _bounded(Decimal(str(value)))

    match = _LEADING_NUMBER.match(str(value).strip())
    if not match:
        return None
    try:
        return _bounded(Decimal(match.group(0)))
    except InvalidOperation:
        return None


def _parse_ascii_fraction(text: str) -> Optional[Decimal]:
    numerator_text, _, denominator_text = text.partition("/")
    numerator = parse_decimal(numerator_text)
    denominator = parse_decimal(denominator_text)
    if numerator is None or denominator is None or denominator == 0:
        return None
    return numerator / denominator


def _parse_mixed_number(match: "re.Match[str]") -> Optional[Decimal]:
    whole = Decimal(match.group(1))
    if match.group(2):
        return whole + FRACTION_GLYPHS[match.group(2)]
    denominator = Decimal(match.group(4))
    if denominator == 0:
        return None
    return whole + Decimal(match.group(3)) / denominator


def parse_quantity(value: QuantityInput) -> Decimal:
    """
    Parse a quantity that may contain fractions.

    Args:
        value: Quantity text (e.g., "½", "1 ½", "1/4", "200") or a number

    Returns:
        Non-negative Decimal; zero for empty, unparseable, negative or
        out-of-range input

    Examples:
        >>> parse_quantity("½")
        Decimal('0.5')
        >>> parse_quantity("1 ½")
        Decimal('1.5')
        >>> parse_quantity("3/0")
        Decimal('0')
    """
    if value is None:
        return ZERO
    if not isinstance(value, str):
        result = parse_decimal(value)
    else:
        text = value.strip()
        if not text:
            return ZERO
        if text in FRACTION_GLYPHS:
            return FRACTION_GLYPHS[text]

        mixed = _MIXED_NUMBER.match(text)
        if mixed:
            result = _parse_mixed_number(mixed)
        elif "/" in text:
            result = _parse_ascii_fraction(text)
        else:
            result = parse_decimal(text)

    result = _bounded(result)
    if result is None or result < 0:
        return ZERO
    return result
