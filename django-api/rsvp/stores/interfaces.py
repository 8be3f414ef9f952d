"""Store interfaces (repository pattern).

Stores must be swappable and return domain models.
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from contextlib import AbstractContextManager

from rsvp.domain import (
    Companion,
    ConfirmationFields,
    ConfirmationId,
    ExistingConfirmation,
    Person,
    PersonId,
)


class RsvpStore(ABC):
    """Interface for roster and confirmation persistence.

    Read failures raise StoreReadError, write failures StoreWriteError.
    """

    @abstractmethod
    def search_people(self, query: str, limit: int) -> list[Person]:
        """Return people whose name contains ``query`` (case-insensitive), by name."""
        ...

    @abstractmethod
    def get_person(self, person_id: PersonId) -> Person | None:
        """Return a person by ID, or None if not found."""
        ...

    @abstractmethod
    def find_confirmation_by_person(
        self, person_id: PersonId
    ) -> ExistingConfirmation | None:
        """Return the person's confirmation with its companions, or None."""
        ...

    @abstractmethod
    def document_matches(self, confirmation_id: ConfirmationId, candidate: str) -> bool:
        """Check ``candidate`` against the stored document, both trimmed."""
        ...

    @abstractmethod
    def sum_seats_sold(self) -> int:
        """Total transport seats held by all confirmations."""
        ...

    @abstractmethod
    def insert_confirmation(self, fields: ConfirmationFields) -> ConfirmationId:
        """Insert a confirmation.

        Raises:
            AlreadyConfirmedError: If the person already holds one.
        """
        ...

    @abstractmethod
    def update_confirmation(
        self, confirmation_id: ConfirmationId, fields: ConfirmationFields
    ) -> None:
        ...

    @abstractmethod
    def replace_companions(
        self, confirmation_id: ConfirmationId, companions: Sequence[Companion]
    ) -> None:
        """Atomically swap the companion list of a confirmation."""
        ...

    @abstractmethod
    def atomic(self) -> AbstractContextManager:
        """Unit of work: writes inside the block commit together or not at all."""
        ...


class SearchCounter(ABC):
    """Autocomplete generation shared by every request of one visitor.

    A search takes a new generation before querying and compares it with the
    current one afterwards. Implementations must increment atomically.
    """

    @abstractmethod
    def next_generation(self) -> int:
        ...

    @abstractmethod
    def current_generation(self) -> int:
        ...
