"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the HTTP and CLI layers can catch them uniformly and map them to status
codes or user-friendly messages.
"""


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class MissingRequiredFieldError(ValidationError):
    """A required field (the item name) was absent or blank."""


class NoPhotoSuppliedError(ValidationError):
    """A photo upload was expected but none was attached."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class NoPhotoAssociatedError(EntityNotFoundError):
    """The record exists but has no photo reference."""


class PhotoFileMissingError(EntityNotFoundError):
    """The record references a photo file that is no longer on disk."""


class PersistenceError(Exception):
    """The durable state could not be read back into records."""
