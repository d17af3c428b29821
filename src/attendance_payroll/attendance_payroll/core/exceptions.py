class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class NotFoundError(DomainError):
    """Raised when an operation targets a nonexistent user, log or record."""


class DuplicateSessionError(DomainError):
    """Raised on clock-in when a log already exists for that user and day."""


class AlreadyClosedError(DomainError):
    """Raised on clock-out when the log already has a clock-out time."""


class ClockSkewError(DomainError):
    """Raised when clock-out would precede the stored clock-in time."""


class AlreadyPaidError(DomainError):
    """Raised when marking an already paid payroll record as paid."""
