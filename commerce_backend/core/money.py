# core/money.py

"""
MONEY + QUANTITY NORMALIZERS

HARD RULES:
- Money is Decimal with 2 places (ROUND_HALF_UP).
- Unit costs keep 4 places so weighted FIFO averages survive storage.
- Quantities are whole integer units.
- NaN and Infinity are rejected as ValidationError.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from core.errors import ValidationError

TWOPLACES = Decimal("0.01")
FOURPLACES = Decimal("0.0001")
ZERO = Decimal("0.00")


def _decimal(value) -> Decimal:
    if value is None or value == "":
        return Decimal("0")
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value))
        except (InvalidOperation, ValueError) as exc:
            raise ValidationError(f"Invalid decimal value: {value!r}") from exc
    if not result.is_finite():
        raise ValidationError(f"Invalid decimal value: {value!r}")
    return result


def money(value) -> Decimal:
    return _decimal(value).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def unit_cost(value) -> Decimal:
    return _decimal(value).quantize(FOURPLACES, rounding=ROUND_HALF_UP)


def to_int_qty(value) -> int:
    """
    Quantity normalizer.
    Accepts ints and digit strings; rejects bools, floats and fractions.
    """
    if value is None or value == "":
        return 0

    if isinstance(value, bool):
        raise ValidationError("quantity must be a whole integer unit")

    if isinstance(value, int):
        return value

    if isinstance(value, str):
        s = value.strip()
        if s.isdigit():
            return int(s)

    raise ValidationError("quantity must be a whole integer unit")
