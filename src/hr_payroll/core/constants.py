"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

LEAVE_REASON_MIN_LENGTH = 10
LEAVE_REASON_MAX_LENGTH = 1000
REJECTION_NOTES_MIN_LENGTH = 10
ADMIN_NOTES_MAX_LENGTH = 500

DEFAULT_PAYSLIP_HISTORY = 12
MAX_PAYSLIP_HISTORY = 50
DEFAULT_LIST_LIMIT = 200

MIN_PAYROLL_YEAR = 2020
MAX_PAYROLL_YEAR = 2030
