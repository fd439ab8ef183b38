"""Exceptions raised by the training-tracker engine."""


class TrainingTrackerError(Exception):
    """Base exception for training-tracker errors."""
    pass


class NotFoundError(TrainingTrackerError):
    """Raised when a requested record does not exist."""

    def __init__(self, entity: str, entity_id: str):
        super().__init__(f"{entity} not found: {entity_id}")
        self.entity = entity
        self.entity_id = entity_id


class ValidationError(TrainingTrackerError):
    """Raised when caller input is missing or malformed."""
    pass


class ReferentialIntegrityError(TrainingTrackerError):
    """Raised when a record points at a parent that does not exist."""
    pass


class InvalidFormatError(TrainingTrackerError):
    """Raised when an import payload cannot be parsed or is structurally invalid."""
    pass


class SchemaVersionMismatchError(TrainingTrackerError):
    """Raised when an import payload has an incompatible major schema version."""

    def __init__(self, found: str, expected: str):
        super().__init__(
            f"Import failed: incompatible schema version {found}, expected {expected}"
        )
        self.found = found
        self.expected = expected


class TransactionError(TrainingTrackerError):
    """Raised when the database rejects a transaction. Nothing was written."""
    pass
