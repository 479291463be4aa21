class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class InvalidRangeError(ValidationError):
    """Raised when an end date comes before its start date."""


class InvalidAmountError(ValidationError):
    """Raised when a monetary amount is out of range (e.g. negative income)."""


class NotFoundError(DomainError):
    """Raised when a referenced employee or request does not exist."""


class MissingCompensationError(DomainError):
    """Raised when a payslip is requested for an employee without a base salary."""


class OverlapError(DomainError):
    """Raised when a leave range overlaps an already approved leave."""


class InvalidTransitionError(DomainError):
    """Raised when approving/rejecting a request that is no longer pending."""


class AuthorizationError(DomainError):
    """Raised when a caller lacks permission for an action."""
