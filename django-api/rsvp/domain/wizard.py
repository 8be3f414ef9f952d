"""RSVP wizard state and step transitions.

The wizard walks a registrant through six steps:

    IDENTIFY -> ATTENDANCE -> COMPANIONS -> TRANSPORT -> SUMMARY -> SUCCESS

Declining attendance jumps straight to SUCCESS. Selecting a person who
already holds a confirmation parks the wizard on IDENTIFY until the edit
secret is verified (or the duplicate flow is cancelled).

Every step function takes the state explicitly and changes the draft only
through ``WizardState.apply_update`` so the cost breakdown can never drift
from the companions and transport choice it was derived from.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field, fields, replace
from enum import Enum, IntEnum

from rsvp.domain.errors import (
    DraftValidationError,
    DuplicatePendingError,
    InsufficientSeatsError,
    InvalidStepError,
)
from rsvp.domain.models import Companion, CostBreakdown, ExistingConfirmation, Person
from rsvp.domain.pricing import calculate_costs, count_transport_seats, is_lap_eligible
from rsvp.domain.value_objects import ConfirmationId, Money

MIN_DOCUMENT_LENGTH = 5
MAX_ADULTS = 2
MAX_CHILDREN = 5


class Step(IntEnum):
    IDENTIFY = 1
    ATTENDANCE = 2
    COMPANIONS = 3
    TRANSPORT = 4
    SUMMARY = 5
    SUCCESS = 6


BACKWARD_STEPS = frozenset({Step.ATTENDANCE, Step.COMPANIONS, Step.TRANSPORT})


class Outcome(Enum):
    DECLINED = "declined"
    FREE = "free"
    PAYMENT = "payment"


@dataclass(frozen=True)
class Draft:
    """The in-progress, unpersisted RSVP."""

    person: Person | None = None
    document: str = ""
    attending: bool | None = None
    companions: tuple[Companion, ...] = ()
    wants_transport: bool | None = None
    lap_exemptions: frozenset[int] = frozenset()
    costs: CostBreakdown = field(default_factory=CostBreakdown.empty)


DRAFT_FIELDS = frozenset(f.name for f in fields(Draft)) - {"costs"}
COST_FIELDS = frozenset({"companions", "wants_transport", "lap_exemptions"})


@dataclass(frozen=True)
class SuccessOutcome:
    kind: Outcome
    first_name: str
    total: Money
    payment_url: str | None = None
    redirect_countdown: int | None = None


@dataclass
class WizardState:
    """Single source of truth for one wizard session."""

    draft: Draft = field(default_factory=Draft)
    step: Step = Step.IDENTIFY
    editing_id: ConfirmationId | None = None
    pending_duplicate_id: ConfirmationId | None = None
    held_seats: int = 0
    declined: bool = False
    confirmed_id: ConfirmationId | None = None

    @property
    def is_edit_mode(self) -> bool:
        return self.editing_id is not None

    @property
    def duplicate_pending(self) -> bool:
        return self.pending_duplicate_id is not None

    def apply_update(self, **changes) -> None:
        """Merge changes into the draft, recomputing costs when they depend on it."""
        unknown = set(changes) - DRAFT_FIELDS
        if unknown:
            raise TypeError(f"Unknown draft fields: {', '.join(sorted(unknown))}")

        if "companions" in changes:
            changes["companions"] = tuple(changes["companions"])
        if "lap_exemptions" in changes:
            changes["lap_exemptions"] = frozenset(changes["lap_exemptions"])

        draft = replace(self.draft, **changes)
        if COST_FIELDS & changes.keys():
            draft = replace(
                draft,
                costs=calculate_costs(
                    draft.companions, bool(draft.wants_transport), draft.lap_exemptions
                ),
            )
        self.draft = draft


def _require_step(state: WizardState, action: str, *steps: Step) -> None:
    if state.step not in steps:
        raise InvalidStepError(action, state.step.name)


def select_person(
    state: WizardState, person: Person, existing_id: ConfirmationId | None = None
) -> None:
    """Pick the registrant. A known ``existing_id`` parks the wizard on IDENTIFY."""
    _require_step(state, "select a person", Step.IDENTIFY)
    state.draft = Draft(person=person)
    state.editing_id = None
    state.held_seats = 0
    state.pending_duplicate_id = existing_id


def cancel_duplicate(state: WizardState) -> None:
    _require_step(state, "cancel the duplicate check", Step.IDENTIFY)
    state.draft = Draft()
    state.pending_duplicate_id = None


def resume_in_edit_mode(
    state: WizardState, existing: ExistingConfirmation, document: str
) -> None:
    """Replace the draft with a verified existing confirmation and move on."""
    _require_step(state, "edit a confirmation", Step.IDENTIFY)
    if state.pending_duplicate_id != existing.id:
        raise InvalidStepError("edit a confirmation", state.step.name)

    state.draft = Draft(person=state.draft.person)
    state.apply_update(
        document=document.strip(),
        attending=True,
        companions=existing.companions,
        wants_transport=existing.wants_transport,
        lap_exemptions=(),
    )
    state.editing_id = existing.id
    state.held_seats = existing.transport_seats
    state.pending_duplicate_id = None
    state.step = Step.ATTENDANCE


def confirm_identity(
    state: WizardState, document: str, min_length: int = MIN_DOCUMENT_LENGTH
) -> None:
    _require_step(state, "confirm identity", Step.IDENTIFY)
    if state.draft.person is None:
        raise DraftValidationError("person", "Select your name first")
    if state.duplicate_pending:
        raise DuplicatePendingError()

    document = document.strip()
    if len(document) < min_length:
        raise DraftValidationError(
            "document", f"Document must have at least {min_length} characters"
        )
    state.apply_update(document=document)
    state.step = Step.ATTENDANCE


def choose_attendance(state: WizardState, attending: bool) -> None:
    _require_step(state, "answer attendance", Step.ATTENDANCE)
    if attending:
        state.apply_update(attending=True)
        state.declined = False
        state.step = Step.COMPANIONS
        return

    state.apply_update(
        attending=False, companions=(), wants_transport=None, lap_exemptions=()
    )
    state.declined = True
    state.step = Step.SUCCESS


def set_companions(state: WizardState, companions: Sequence[Companion]) -> None:
    """Replace the companion list. Lap exemptions refer to positions, so they reset."""
    _require_step(state, "edit companions", Step.COMPANIONS)
    companions = [
        replace(c, name=c.name.strip(), document=c.document.strip()) for c in companions
    ]
    state.apply_update(companions=companions, lap_exemptions=())


def validate_companions(companions: Sequence[Companion]) -> None:
    for index, companion in enumerate(companions):
        if not companion.name.strip():
            raise DraftValidationError(
                f"companions[{index}].name", "Companion name is required"
            )
        if not companion.document.strip():
            raise DraftValidationError(
                f"companions[{index}].document", "Companion document is required"
            )

    adults = sum(1 for companion in companions if companion.is_adult)
    if adults > MAX_ADULTS:
        raise DraftValidationError(
            "companions", f"At most {MAX_ADULTS} adult companions are allowed"
        )
    if len(companions) - adults > MAX_CHILDREN:
        raise DraftValidationError(
            "companions", f"At most {MAX_CHILDREN} child companions are allowed"
        )


def confirm_companions(state: WizardState) -> None:
    _require_step(state, "confirm companions", Step.COMPANIONS)
    validate_companions(state.draft.companions)
    state.step = Step.TRANSPORT


def _validate_lap_exemptions(
    companions: Sequence[Companion], indices: Iterable[int]
) -> frozenset[int]:
    indices = frozenset(indices)
    for index in indices:
        if not 0 <= index < len(companions) or not is_lap_eligible(companions[index]):
            raise DraftValidationError(
                "lap_exemptions", "Only children aged 5 or under can travel on a lap"
            )
    return indices


def set_lap_exemptions(state: WizardState, indices: Iterable[int]) -> None:
    _require_step(state, "mark lap travel", Step.TRANSPORT)
    indices = _validate_lap_exemptions(state.draft.companions, indices)
    state.apply_update(lap_exemptions=indices)


def seats_needed(state: WizardState) -> int:
    return count_transport_seats(state.draft.companions, state.draft.lap_exemptions)


def choose_transport(
    state: WizardState,
    wants_transport: bool,
    seats_available: int,
    lap_exemptions: Iterable[int] | None = None,
) -> None:
    """Record the transport choice. "Yes" is refused when seats run short."""
    _require_step(state, "choose transport", Step.TRANSPORT)
    if not wants_transport:
        state.apply_update(wants_transport=False, lap_exemptions=())
        state.step = Step.SUMMARY
        return

    if lap_exemptions is None:
        lap_exemptions = state.draft.lap_exemptions
    lap_exemptions = _validate_lap_exemptions(state.draft.companions, lap_exemptions)
    needed = count_transport_seats(state.draft.companions, lap_exemptions)
    if needed > seats_available:
        raise InsufficientSeatsError(needed=needed, available=seats_available)

    state.apply_update(wants_transport=True, lap_exemptions=lap_exemptions)
    state.step = Step.SUMMARY


def go_back(state: WizardState) -> None:
    if state.step not in BACKWARD_STEPS:
        raise InvalidStepError("go back", state.step.name)
    state.step = Step(state.step - 1)


def mark_submitted(state: WizardState, confirmation_id: ConfirmationId) -> None:
    _require_step(state, "submit", Step.SUMMARY)
    state.confirmed_id = confirmation_id
    state.step = Step.SUCCESS


def success_outcome(
    state: WizardState, payment_url: str, redirect_countdown: int
) -> SuccessOutcome:
    _require_step(state, "show the outcome", Step.SUCCESS)
    person = state.draft.person
    first_name = person.first_name if person else ""
    total = state.draft.costs.total

    if state.declined:
        return SuccessOutcome(kind=Outcome.DECLINED, first_name=first_name, total=total)
    if not total:
        return SuccessOutcome(kind=Outcome.FREE, first_name=first_name, total=total)
    return SuccessOutcome(
        kind=Outcome.PAYMENT,
        first_name=first_name,
        total=total,
        payment_url=payment_url,
        redirect_countdown=redirect_countdown,
    )
