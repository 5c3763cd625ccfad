"""Numeric extraction from unit-tagged strings ("15 min", "600 kcal", "25g").

A field that holds no digits is treated as absent: callers get None back
and decide what absence means for them.
"""

import re
from fractions import Fraction
from typing import Optional

_FIRST_INT = re.compile(r"\d+")

# Leading quantity on an ingredient line: "1 1/2", "1/2", "0.5", "2"
_LEADING_QUANTITY = re.compile(r"^\s*(\d+\s+\d+/\d+|\d+/\d+|\d+(?:\.\d+)?)(?=\s|$)")


def extract_first_int(value: Optional[str]) -> Optional[int]:
    """Return the first run of digits in value as an int, or None if there is none.

    Examples:
        >>> extract_first_int("15 min")
        15
        >>> extract_first_int("250 kcal per 2 pancakes")
        250
        >>> extract_first_int("to taste") is None
        True
    """
    if value is None:
        return None
    match = _FIRST_INT.search(str(value))
    if not match:
        return None
    return int(match.group(0))


def total_minutes(prep_time: Optional[str], cook_time: Optional[str]) -> Optional[int]:
    """Sum of parsed prep and cook minutes; None unless both parse."""
    prep = extract_first_int(prep_time)
    cook = extract_first_int(cook_time)
    if prep is None or cook is None:
        return None
    return prep + cook


def format_minutes(minutes: int) -> str:
    return f"{minutes} min"


def split_leading_quantity(text: str) -> tuple[Optional[Fraction], str]:
    """Split an ingredient line into (quantity, remainder).

    Returns (None, text) when the line does not start with a quantity.
    """
    match = _LEADING_QUANTITY.match(text)
    if not match:
        return None, text
    raw = match.group(1)
    rest = text[match.end():].lstrip()
    try:
        if " " in raw:
            whole, frac = raw.split()
            quantity = Fraction(int(whole)) + Fraction(frac)
        else:
            quantity = Fraction(raw)
    except ZeroDivisionError:
        return None, text
    return quantity, rest


def format_quantity(quantity: Fraction) -> str:
    """Render a quantity as a whole number, fraction or mixed number (denominator <= 8).

    Positive amounts too small for an eighth are rendered exactly rather than as 0.
    """
    limited = quantity.limit_denominator(8)
    if limited or not quantity:
        quantity = limited
    if quantity.denominator == 1:
        return str(quantity.numerator)
    whole, remainder = divmod(quantity.numerator, quantity.denominator)
    if whole == 0:
        return f"{remainder}/{quantity.denominator}"
    return f"{whole} {remainder}/{quantity.denominator}"
