import re
from decimal import Decimal, InvalidOperation
from typing import Optional

# Plain decimal or exponent notation, no digit separators.
_AMOUNT_PATTERN = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


def _to_decimal(amount: object) -> Optional[Decimal]:
    """
    Parse a decimal string (or int) into a finite Decimal.

    Returns None for non-strings, empty strings, NaN/Infinity and anything
    outside plain decimal or exponent notation (e.g. "1_000", "0x10"). Floats are rejected: amounts travel as strings.
    """
    if isinstance(amount, bool):
        return None
    if isinstance(amount, int):
        return Decimal(amount)
    if not isinstance(amount, str) or _AMOUNT_PATTERN.fullmatch(amount.strip()) is None:
        return None
    try:
        parsed = Decimal(amount.strip())
    except InvalidOperation:
        return None
    return parsed if parsed.is_finite() else None


def is_positive_amount(amount: object) -> bool:
    """True when `amount` is a strictly positive finite number. Never raises."""
    parsed = _to_decimal(amount)
    return parsed is not None and parsed > 0


def is_non_negative_amount(amount: object) -> bool:
    parsed = _to_decimal(amount)
    return parsed is not None and parsed >= 0


def amount_not_above(lower: object, upper: object) -> bool:
    """True when both parse and lower <= upper (e.g. toAmountMin vs toAmount)."""
    lower_value = _to_decimal(lower)
    upper_value = _to_decimal(upper)
    if lower_value is None or upper_value is None:
        return False
    return lower_value <= upper_value
