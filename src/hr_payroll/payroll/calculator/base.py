from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal

from ...common.money import Number

MONTHS_PER_YEAR = Decimal("12")


class TaxCalculator(ABC):
    """Calculator interface (Strategy Pattern for income tax)."""

    @abstractmethod
    def annual_tax(self, annual_income: Number) -> Decimal:
        raise NotImplementedError

    def monthly_tax(self, annual_income: Number) -> Decimal:
        return self.annual_tax(annual_income) / MONTHS_PER_YEAR
