class DomainError(Exception):
    """Base exception for business rule violations."""

    kind = "domain_error"


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    kind = "validation_error"


class InvalidShiftError(ValidationError):
    kind = "invalid_shift"


class InvalidRangeError(ValidationError):
    kind = "invalid_range"


class EmptyReasonError(ValidationError):
    kind = "empty_reason"


class StateConflictError(DomainError):
    """Raised when a conditional write finds the row already handled."""

    kind = "state_conflict"


class AlreadyCheckedInError(StateConflictError):
    kind = "already_checked_in"


class AlreadyCheckedOutError(StateConflictError):
    kind = "already_checked_out"


class AlreadyProcessedError(StateConflictError):
    kind = "already_processed"


class ActiveLeaveRequestExistsError(StateConflictError):
    kind = "active_leave_request_exists"


class ResourceError(DomainError):
    kind = "resource_error"


class NotFoundError(ResourceError):
    kind = "not_found"


class NotCheckedInError(ResourceError):
    kind = "not_checked_in"


class InsufficientBalanceError(ResourceError):
    kind = "insufficient_balance"

    def __init__(self, message: str, *, requested=None, available=None):
        super().__init__(message)
        self.requested = requested
        self.available = available


class AuthenticationError(DomainError):
    """Raised when the caller is not authenticated."""

    kind = "authentication_error"


class UnauthorizedError(AuthenticationError):
    kind = "unauthorized"


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    kind = "forbidden"


class NotOwnerError(AuthorizationError):
    kind = "not_owner"
