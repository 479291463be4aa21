from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Sequence

from ...common.money import Number, to_decimal
from ...core.exceptions import InvalidAmountError, ValidationError
from .base import TaxCalculator


@dataclass(frozen=True)
class TaxBracket:
    """Income slice taxed at ``rate``; ``up_to=None`` means no upper bound."""

    up_to: Optional[Decimal]
    rate: Decimal


DEFAULT_BRACKETS: tuple[TaxBracket, ...] = (
    TaxBracket(up_to=Decimal("250000"), rate=Decimal("0")),
    TaxBracket(up_to=Decimal("500000"), rate=Decimal("0.05")),
    TaxBracket(up_to=Decimal("1000000"), rate=Decimal("0.20")),
    TaxBracket(up_to=None, rate=Decimal("0.30")),
)


class ProgressiveTaxCalculator(TaxCalculator):
    """Standard rule: each bracket's rate applies only to the income inside it."""

    def __init__(self, brackets: Sequence[TaxBracket] = DEFAULT_BRACKETS):
        self._brackets = tuple(brackets)
        self._validate()

    @property
    def brackets(self) -> tuple[TaxBracket, ...]:
        return self._brackets

    def _validate(self) -> None:
        if not self._brackets:
            raise ValidationError("At least one tax bracket is required")
        last_cap = Decimal("0")
        for index, bracket in enumerate(self._brackets):
            if not Decimal("0") <= bracket.rate <= Decimal("1"):
                raise ValidationError(f"Tax rate {bracket.rate} must be between 0 and 1")
            if bracket.up_to is None:
                if index != len(self._brackets) - 1:
                    raise ValidationError("Only the last tax bracket may be unbounded")
                continue
            if bracket.up_to <= last_cap:
                raise ValidationError("Tax brackets must have strictly increasing caps")
            last_cap = bracket.up_to

    def annual_tax(self, annual_income: Number) -> Decimal:
        income = to_decimal(annual_income, "annual income")
        if income < 0:
            raise InvalidAmountError(f"Income cannot be negative: {income}")

        total_tax = Decimal("0")
        lower = Decimal("0")
        for bracket in self._brackets:
            if income <= lower:
                break
            upper = income if bracket.up_to is None else min(income, bracket.up_to)
            total_tax += (upper - lower) * bracket.rate
            lower = upper

        # Income above a bounded top bracket keeps the top marginal rate.
        if income > lower:
            total_tax += (income - lower) * self._brackets[-1].rate
        return total_tax
