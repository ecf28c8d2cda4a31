class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class InvalidRecordError(ValidationError):
    """Raised when a stamp record is not well-formed."""


class AlreadyCheckedInError(ValidationError):
    """Raised when a user with an open record tries to check in again."""


class RecordStillOpenError(ValidationError):
    """Raised when a duration is requested for a record without check-out."""


class NotFoundError(DomainError):
    """Raised when a stamp record id does not exist."""


class NegativeWorkedTimeError(DomainError):
    """Raised when break deduction would produce a negative worked time."""


class StoreError(Exception):
    """Raised for any failure of the record store (connectivity, constraints, timeouts)."""


class OpenRecordConflictError(StoreError):
    """Raised by the store when a second open record for a user would be written."""
