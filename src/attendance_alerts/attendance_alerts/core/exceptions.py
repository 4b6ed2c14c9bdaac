class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class InvalidRangeError(ValidationError):
    """Raised when date range parameters are malformed or inverted."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class ForbiddenError(AuthorizationError):
    """Raised when a requester's role or ownership does not cover the scope."""


class NotFoundError(DomainError):
    """Raised when a referenced cohort or learner does not exist."""
