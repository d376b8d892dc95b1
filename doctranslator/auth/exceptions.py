class AuthError(Exception):
    """Base exception for authentication flow errors."""


class InvalidInputError(AuthError):
    """Raised by client-side form validation. Never reaches the network."""


class UsernameTakenError(AuthError):
    """Raised when sign-up picks a username the backend already knows."""


class LockedOutError(AuthError):
    """Raised when sign-in is attempted during the failed-attempts cool-down."""
