class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when login credentials or a PIN are invalid."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class NotFoundError(DomainError):
    """Raised when a referenced record does not exist."""


class GeofenceError(DomainError):
    """Raised when a punch is attempted outside every authorized perimeter."""


class BiometricError(DomainError):
    """Raised when a face cannot be extracted or identified."""
