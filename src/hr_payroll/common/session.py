"""Caller identity taken from the Flask session at the HTTP boundary.

Services never read the session; controllers pass role and ids explicitly.
"""

from __future__ import annotations

from functools import wraps
from typing import Optional

from flask import session

from ..core.constants import MAX_PAYROLL_YEAR, MIN_PAYROLL_YEAR
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, ValidationError
from .http import fail


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session or "role" not in session:
            return fail("Authentication required", status=401, code="UNAUTHORIZED")
        return view(*args, **kwargs)

    return wrapper


def current_role() -> Role:
    try:
        return Role(session.get("role"))
    except ValueError:
        raise AuthorizationError("Unknown role")


def current_user_id() -> str:
    return str(session["user_id"])


def current_employee_id() -> Optional[str]:
    value = session.get("employee_id")
    return str(value) if value else None


def parse_int(value, field_name: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer")


def require_payroll_year(year: int) -> int:
    if not MIN_PAYROLL_YEAR <= int(year) <= MAX_PAYROLL_YEAR:
        raise ValidationError(f"year must be between {MIN_PAYROLL_YEAR} and {MAX_PAYROLL_YEAR}")
    return int(year)
