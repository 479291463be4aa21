from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Union

from ..core.exceptions import ValidationError

Number = Union[int, float, str, Decimal]

WHOLE_UNIT = Decimal("1")
CENT = Decimal("0.01")


def to_decimal(value: Number, field_name: str = "amount") -> Decimal:
    """Convert user/DB numbers to Decimal without binary float artefacts."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a number")
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{field_name} must be a number")


def round_money(value: Decimal) -> int:
    """Round to the nearest whole currency unit (half away from zero)."""
    return int(value.quantize(WHOLE_UNIT, rounding=ROUND_HALF_UP))


def ratio_to_percent(ratio: Decimal) -> int:
    return round_money(ratio * 100)


def round_cents(value: Decimal) -> float:
    """Two-decimal rendering for rates and hours."""
    return float(value.quantize(CENT, rounding=ROUND_HALF_UP))
