from __future__ import annotations

from dataclasses import dataclass, fields, replace
from decimal import Decimal
from typing import Mapping, Optional

from ..common.money import to_decimal
from ..core.exceptions import ValidationError

_WEIGHT_FIELDS = ("half_day_weight", "late_weight")
_POSITIVE_FIELDS = ("standard_weekly_hours", "weeks_per_year", "overtime_multiplier")


@dataclass(frozen=True)
class PayrollPolicy:
    """Allowance and deduction rates used by the payslip computation.

    Rates are fractions of their basis: HRA, DA and PF apply to basic pay,
    ESI (state insurance) to gross pay. Professional tax is a flat amount
    charged only when gross pay is above ``professional_tax_threshold``.

    ``half_day_weight`` and ``late_weight`` decide how much a Half Day or Late
    record counts toward attended days. Both default to 0, so only Present
    days count.

    The last three fields drive hourly payroll records. Regular pay covers at
    most ``standard_weekly_hours``; overtime is paid at ``overtime_multiplier``.
    A monthly salary converts to an hourly rate over
    ``weeks_per_year * standard_weekly_hours`` hours a year.
    """

    hra_rate: Decimal = Decimal("0.40")
    da_rate: Decimal = Decimal("0.12")
    medical_allowance: Decimal = Decimal("1250")
    conveyance_allowance: Decimal = Decimal("1600")
    pf_rate: Decimal = Decimal("0.12")
    esi_rate: Decimal = Decimal("0.0175")
    professional_tax: Decimal = Decimal("200")
    professional_tax_threshold: Decimal = Decimal("10000")
    half_day_weight: Decimal = Decimal("0")
    late_weight: Decimal = Decimal("0")
    standard_weekly_hours: Decimal = Decimal("40")
    weeks_per_year: Decimal = Decimal("52")
    overtime_multiplier: Decimal = Decimal("1.5")

    def __post_init__(self) -> None:
        for f in fields(self):
            value = to_decimal(getattr(self, f.name), f.name)
            if value < 0:
                raise ValidationError(f"{f.name} cannot be negative")
            if f.name in _WEIGHT_FIELDS and value > 1:
                raise ValidationError(f"{f.name} must be between 0 and 1")
            if f.name in _POSITIVE_FIELDS and value == 0:
                raise ValidationError(f"{f.name} must be greater than 0")
            object.__setattr__(self, f.name, value)

    @classmethod
    def from_mapping(cls, overrides: Optional[Mapping[str, object]] = None) -> "PayrollPolicy":
        """Build a policy from settings, e.g. ``{"hra_rate": "0.5"}``."""
        policy = cls()
        if not overrides:
            return policy

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(overrides) - known)
        if unknown:
            raise ValidationError(f"Unknown payroll policy keys: {', '.join(unknown)}")
        return replace(policy, **{k: to_decimal(v, k) for k, v in overrides.items()})
