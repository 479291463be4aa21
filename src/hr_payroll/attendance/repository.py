from __future__ import annotations

from typing import Protocol, Sequence

from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def get_for_month(self, employee_id: str, year: int, month: int) -> Sequence[AttendanceRecord]:
        """Return the employee's records dated inside the given month."""

        raise NotImplementedError
