class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class NotFoundError(DomainError):
    """Raised when a referenced record or user does not exist."""


class ConflictError(DomainError):
    """Raised when a write collides with existing state."""


class AlreadyCheckedInError(ConflictError):
    """Raised when the user already has a check-in for the day."""


class CollaboratorError(DomainError):
    """Base for failures of external services that are required for correctness."""


class PhotoStoreUnavailableError(CollaboratorError):
    """Raised when the photo store is not configured."""


class PhotoDeletionError(CollaboratorError):
    """Raised when the photo store refuses or fails to delete an image."""
