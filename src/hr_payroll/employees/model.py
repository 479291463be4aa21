from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from ..common.money import to_decimal
from ..core.exceptions import InvalidAmountError

_MONEY_FIELDS = ("base_salary", "hourly_rate")


@dataclass(frozen=True)
class Compensation:
    """Read-only compensation snapshot owned by employee management.

    ``base_salary`` is monthly. ``hourly_rate`` is optional; hourly payroll
    derives one from the base salary when it is missing.

    Note: the engine never mutates employees; it only reads this snapshot.
    """

    employee_id: str
    full_name: str
    base_salary: Optional[Decimal]
    hire_date: Optional[date] = None
    hourly_rate: Optional[Decimal] = None
    employee_number: Optional[str] = None
    department: Optional[str] = None
    designation: Optional[str] = None

    def __post_init__(self) -> None:
        for name in _MONEY_FIELDS:
            value = getattr(self, name)
            if value is None:
                continue
            amount = to_decimal(value, name)
            if amount < 0:
                raise InvalidAmountError(f"{name} cannot be negative")
            object.__setattr__(self, name, amount)

    def to_dict(self) -> dict:
        return {
            "id": self.employee_id,
            "employee_number": self.employee_number,
            "full_name": self.full_name,
            "department": self.department or "N/A",
            "designation": self.designation or "N/A",
            "hire_date": self.hire_date.isoformat() if self.hire_date else None,
        }
