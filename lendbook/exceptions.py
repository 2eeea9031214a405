"""Custom exception hierarchy for lendbook."""


class LendbookError(Exception):
    """Base exception for all lendbook errors."""


class EntityNotFoundError(LendbookError):
    """Raised when a referenced entity does not exist."""


class ReferentialIntegrityError(EntityNotFoundError):
    """Raised when a record references a loan that is not in the book."""


class InvalidEntityStateError(LendbookError):
    """Raised when an entity is in an invalid state for the operation."""


class ConfigurationError(LendbookError):
    """Raised when configuration is invalid or missing."""
