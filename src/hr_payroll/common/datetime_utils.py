from __future__ import annotations

from datetime import date, datetime

from ..core.exceptions import ValidationError


def parse_iso_date(value: str, field_name: str = "date") -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime(str(value or "").strip(), "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(f"{field_name} must be a valid YYYY-MM-DD date")


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def parse_pay_period(value: str, field_name: str = "period") -> str:
    """Validate a YYYY-MM pay period and return it normalized."""
    try:
        return datetime.strptime(str(value or "").strip(), "%Y-%m").strftime("%Y-%m")
    except ValueError:
        raise ValidationError(f"{field_name} must be a valid YYYY-MM period")
