"""Wizard service - all business logic that needs the store lives here.

Services:
- Depend only on interfaces (stores)
- Drive the wizard step functions with data loaded from the store
- Degrade gracefully when reads fail, propagate write failures
- Return domain models or raise domain errors
"""

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from rsvp.domain import (
    Capacity,
    Companion,
    ConfirmationFields,
    ConfirmationId,
    ExistingConfirmation,
    Person,
    PersonId,
)
from rsvp.domain import wizard
from rsvp.domain.errors import (
    DocumentMismatchError,
    DraftValidationError,
    InvalidIdError,
    InvalidStepError,
    PersonNotFoundError,
    StoreReadError,
)
from rsvp.domain.wizard import Draft, Step, SuccessOutcome, WizardState
from rsvp.stores.interfaces import RsvpStore, SearchCounter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WizardSettings:
    transport_capacity: int = 90
    min_document_length: int = wizard.MIN_DOCUMENT_LENGTH
    min_search_length: int = 2
    search_limit: int = 10
    payment_url: str = ""
    redirect_countdown: int = 6


@dataclass(frozen=True)
class Suggestions:
    """One autocomplete reply. Stale replies carry no people."""

    generation: int
    people: list[Person] = field(default_factory=list)
    stale: bool = False


def build_confirmation_fields(draft: Draft) -> ConfirmationFields:
    """Column values for a draft that is ready to be stored."""
    if draft.person is None:
        raise DraftValidationError("person", "Select your name first")
    if draft.attending is not True:
        raise DraftValidationError("attending", "Attendance must be confirmed")

    costs = draft.costs
    return ConfirmationFields(
        person_id=draft.person.id,
        person_name=draft.person.name,
        department=draft.person.department,
        document=draft.document,
        wants_transport=bool(draft.wants_transport),
        total_adults=costs.adult_passes,
        total_children=costs.child_passes,
        total_daily_passes=costs.daily_passes,
        transport_seats=costs.transport_seats,
        total_cost=costs.total,
    )


class WizardService:
    """Service for the RSVP confirmation wizard."""

    def __init__(
        self, store: RsvpStore, settings: WizardSettings | None = None
    ) -> None:
        self._store = store
        self._settings = settings or WizardSettings()

    @property
    def settings(self) -> WizardSettings:
        return self._settings

    def search_people(self, counter: SearchCounter, query: str) -> Suggestions:
        """Autocomplete people by partial name.

        A failed search yields no suggestions. Results are marked stale and
        dropped when a newer search started while this one was running.
        """
        generation = counter.next_generation()
        query = query.strip()
        if len(query) < self._settings.min_search_length:
            return Suggestions(generation=generation)
        try:
            people = self._store.search_people(query, self._settings.search_limit)
        except StoreReadError:
            logger.warning("Person search unavailable, returning no suggestions")
            return Suggestions(generation=generation)
        if counter.current_generation() != generation:
            logger.debug("Dropping stale suggestions for %r", query)
            return Suggestions(generation=generation, stale=True)
        return Suggestions(generation=generation, people=people)

    def select_person(self, state: WizardState, person_id: str) -> bool:
        """Select the registrant. Returns True when a confirmation already exists.

        Raises:
            InvalidIdError: If the person_id is not a valid UUID.
            PersonNotFoundError: If the person is not on the roster.
        """
        try:
            parsed_id = PersonId.from_string(person_id)
        except (TypeError, ValueError) as exc:
            raise InvalidIdError() from exc

        person = self._store.get_person(parsed_id)
        if person is None:
            raise PersonNotFoundError(person_id)

        existing = self._find_existing(person.id)
        wizard.select_person(state, person, existing.id if existing else None)
        if existing:
            logger.info("Person %s already confirmed as %s", person.id, existing.id)
        return existing is not None

    def _find_existing(self, person_id: PersonId) -> ExistingConfirmation | None:
        try:
            return self._store.find_confirmation_by_person(person_id)
        except StoreReadError:
            # The unique constraint on insert still catches a real duplicate.
            logger.warning("Duplicate lookup failed for %s, treating as new", person_id)
            return None

    def verify_document(self, state: WizardState, candidate: str) -> None:
        """Check the edit secret server-side and load the stored confirmation.

        Raises:
            InvalidStepError: If no duplicate is waiting for verification.
            DocumentMismatchError: If the document does not match.
        """
        if state.step is not Step.IDENTIFY or not state.duplicate_pending:
            raise InvalidStepError("verify a document", state.step.name)

        confirmation_id = state.pending_duplicate_id
        if not self._store.document_matches(confirmation_id, candidate):
            logger.warning("Document mismatch for confirmation %s", confirmation_id)
            raise DocumentMismatchError()

        existing = self._store.find_confirmation_by_person(state.draft.person.id)
        if existing is None or existing.id != confirmation_id:
            logger.info("Confirmation %s vanished before editing", confirmation_id)
            state.pending_duplicate_id = None
            return

        wizard.resume_in_edit_mode(state, existing, candidate)
        logger.info("Editing confirmation %s", existing.id)

    def cancel_duplicate(self, state: WizardState) -> None:
        wizard.cancel_duplicate(state)

    def confirm_identity(self, state: WizardState, document: str) -> None:
        wizard.confirm_identity(state, document, self._settings.min_document_length)

    def choose_attendance(self, state: WizardState, attending: bool) -> None:
        wizard.choose_attendance(state, attending)
        if not attending:
            logger.info("Attendance declined")

    def update_companions(
        self, state: WizardState, companions: Sequence[Companion]
    ) -> None:
        wizard.set_companions(state, companions)

    def confirm_companions(
        self, state: WizardState, companions: Sequence[Companion] | None = None
    ) -> None:
        if companions is not None:
            wizard.set_companions(state, companions)
        wizard.confirm_companions(state)

    def set_lap_exemptions(self, state: WizardState, indices: Iterable[int]) -> None:
        wizard.set_lap_exemptions(state, indices)

    def seats_available(self, state: WizardState) -> int:
        """Seats this draft may still take, counting back those it already holds.

        Falls back to the full capacity when the count cannot be read.
        """
        capacity = Capacity(self._settings.transport_capacity)
        try:
            sold = self._store.sum_seats_sold()
        except StoreReadError:
            logger.warning("Seat count unavailable, assuming full capacity")
            return capacity.value
        return capacity.remaining(sold - state.held_seats)

    def choose_transport(
        self,
        state: WizardState,
        wants_transport: bool,
        lap_exemptions: Iterable[int] | None = None,
    ) -> None:
        available = self.seats_available(state) if wants_transport else 0
        wizard.choose_transport(state, wants_transport, available, lap_exemptions)

    def go_back(self, state: WizardState) -> None:
        wizard.go_back(state)

    def submit(self, state: WizardState) -> ConfirmationId:
        """Persist the draft: insert when new, update in edit mode.

        The confirmation row and its companions are written in one unit of
        work, so a failure leaves neither changed.

        Raises:
            AlreadyConfirmedError: If another confirmation for the person won a race.
            StoreWriteError: If the store rejected the write. Retryable.
        """
        if state.step is not Step.SUMMARY:
            raise InvalidStepError("submit", state.step.name)

        fields = build_confirmation_fields(state.draft)
        with self._store.atomic():
            if state.is_edit_mode:
                confirmation_id = state.editing_id
                self._store.update_confirmation(confirmation_id, fields)
            else:
                confirmation_id = self._store.insert_confirmation(fields)
            self._store.replace_companions(confirmation_id, state.draft.companions)

        wizard.mark_submitted(state, confirmation_id)
        logger.info(
            "Confirmation %s %s, total %s",
            confirmation_id,
            "updated" if state.is_edit_mode else "created",
            fields.total_cost,
        )
        return confirmation_id

    def outcome(self, state: WizardState) -> SuccessOutcome:
        return wizard.success_outcome(
            state, self._settings.payment_url, self._settings.redirect_countdown
        )
