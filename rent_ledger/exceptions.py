"""Custom exception hierarchy for rent-ledger."""


class RentLedgerError(Exception):
    """Base exception for all rent-ledger errors."""


class EntityNotFoundError(RentLedgerError):
    """Raised when a referenced entity does not exist."""


class ReferentialIntegrityError(EntityNotFoundError):
    """Raised when a foreign key reference is violated."""


class ValidationError(RentLedgerError):
    """Raised when input is missing a required field or is malformed."""


class ConflictError(RentLedgerError):
    """Raised when a write lost a race against a concurrent writer."""


class UniqueViolationError(ConflictError):
    """Raised when a write would break a uniqueness constraint."""


class InvalidEntityStateError(RentLedgerError):
    """Raised when an entity is in an invalid state for the operation."""


class StoreError(RentLedgerError):
    """Raised when the backing data store fails."""


class ConfigurationError(RentLedgerError):
    """Raised when configuration is invalid or missing."""


class SinkError(RentLedgerError):
    """Raised when a sink operation fails."""
