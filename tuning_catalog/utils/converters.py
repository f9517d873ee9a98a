"""Type conversion utilities for safely handling documents from the content store.

This module is the single source of truth for safe type conversion.
All other modules should import from here instead of defining their own.
"""

import re
from typing import Any


def optional_number(val: Any) -> int | float | None:
    """Convert a document number field, keeping integers integral.

    Editors occasionally store numbers as strings; anything that cannot
    be read as a number becomes None rather than failing validation.

    Examples:
        >>> optional_number("450")
        450
        >>> optional_number(12.5)
        12.5
        >>> optional_number("n/a") is None
        True
    """
    if val is None or val == "" or isinstance(val, bool):
        return None
    try:
        number = float(val)
    except (ValueError, TypeError):
        return None
    if number != number:  # NaN
        return None
    return int(number) if number.is_integer() else number


def parse_price(val: Any) -> float | None:
    """Parse a user-entered price such as ``"4 500 kr"`` or ``"4500.50"``.

    Everything except digits and the decimal point is dropped before parsing.

    Examples:
        >>> parse_price("4 500 kr")
        4500.0
        >>> parse_price("") is None
        True
    """
    if val is None:
        return None
    if isinstance(val, (int, float)) and not isinstance(val, bool):
        return float(val)
    cleaned = re.sub(r"[^0-9.]", "", str(val))
    if not cleaned:
        return None
    try:
        return float(cleaned)
    except ValueError:
        return None
