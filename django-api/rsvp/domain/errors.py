"""Domain error codes for the rsvp module."""

from dataclasses import dataclass
from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    PERSON_NOT_FOUND = "PERSON_NOT_FOUND"
    INVALID_ID = "INVALID_ID"
    VALIDATION_FAILED = "VALIDATION_FAILED"
    INVALID_STEP = "INVALID_STEP"
    DUPLICATE_PENDING = "DUPLICATE_PENDING"
    DOCUMENT_MISMATCH = "DOCUMENT_MISMATCH"
    INSUFFICIENT_SEATS = "INSUFFICIENT_SEATS"
    ALREADY_CONFIRMED = "ALREADY_CONFIRMED"
    STORE_READ_FAILED = "STORE_READ_FAILED"
    STORE_WRITE_FAILED = "STORE_WRITE_FAILED"


@dataclass(eq=False)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class PersonNotFoundError(DomainError):
    """Raised when a person is not on the roster."""

    def __init__(self, person_id: str) -> None:
        super().__init__(
            code=ErrorCode.PERSON_NOT_FOUND,
            message="Person not found",
        )
        self.person_id = person_id


class InvalidIdError(DomainError):
    """Raised when an identifier is not a valid UUID."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.INVALID_ID,
            message="Invalid ID format",
        )


class DraftValidationError(DomainError):
    """Raised when the draft cannot advance because a field is invalid."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(code=ErrorCode.VALIDATION_FAILED, message=message)
        self.field = field


class InvalidStepError(DomainError):
    """Raised when an action is attempted from the wrong wizard step."""

    def __init__(self, action: str, step: str) -> None:
        super().__init__(
            code=ErrorCode.INVALID_STEP,
            message=f"Cannot {action} from step {step}",
        )
        self.action = action
        self.step = step


class DuplicatePendingError(DomainError):
    """Raised when an existing confirmation must be verified before advancing."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.DUPLICATE_PENDING,
            message="You already confirmed. Verify your document to edit it",
        )


class DocumentMismatchError(DomainError):
    """Raised when the edit secret does not match the stored document."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.DOCUMENT_MISMATCH,
            message="Document does not match. Try again",
        )


class InsufficientSeatsError(DomainError):
    """Raised when transport is requested with fewer seats left than needed."""

    def __init__(self, needed: int, available: int) -> None:
        super().__init__(
            code=ErrorCode.INSUFFICIENT_SEATS,
            message="Not enough transport seats left",
        )
        self.needed = needed
        self.available = available


class AlreadyConfirmedError(DomainError):
    """Raised when a person already holds a confirmation on insert."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.ALREADY_CONFIRMED,
            message="You already have a confirmation. Use edit mode",
        )


class StoreReadError(DomainError):
    """Raised by stores when a read cannot be served."""

    def __init__(self, operation: str) -> None:
        super().__init__(
            code=ErrorCode.STORE_READ_FAILED,
            message="Could not load data",
        )
        self.operation = operation


class StoreWriteError(DomainError):
    """Raised by stores when a write failed and was rolled back. Retryable."""

    def __init__(self, operation: str) -> None:
        super().__init__(
            code=ErrorCode.STORE_WRITE_FAILED,
            message="Could not save your confirmation. Please try again",
        )
        self.operation = operation
