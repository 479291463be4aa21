from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Compensation


class EmployeeRepository(Protocol):
    """Repository interface for employee compensation.

    Note (DIP): services depend on this interface, not on a concrete database.
    """

    def get_compensation(self, employee_id: str) -> Optional[Compensation]:
        raise NotImplementedError

    def list_employee_ids(self) -> Sequence[str]:
        """Ids of all active employees, ordered."""

        raise NotImplementedError
