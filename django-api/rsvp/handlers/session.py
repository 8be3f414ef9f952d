"""Keeps the wizard state in the server-side session.

Only the inputs are stored. The cost breakdown is derived again on load.
"""

from uuid import UUID

from django.conf import settings
from django.http import HttpRequest

from rsvp.domain import Companion, ConfirmationId, Person, PersonId
from rsvp.domain.wizard import Step, WizardState
from rsvp.stores.django_store import CacheSearchCounter

SESSION_KEY = "rsvp.wizard"


def _dump_id(value: ConfirmationId | None) -> str | None:
    return str(value.value) if value else None


def _load_id(value: str | None) -> ConfirmationId | None:
    return ConfirmationId(UUID(value)) if value else None


def dump_state(state: WizardState) -> dict:
    draft = state.draft
    person = draft.person
    return {
        "step": state.step.value,
        "person": (
            {
                "id": str(person.id.value),
                "name": person.name,
                "department": person.department,
                "role": person.role,
            }
            if person
            else None
        ),
        "document": draft.document,
        "attending": draft.attending,
        "companions": [
            {"name": c.name, "age": c.age, "document": c.document}
            for c in draft.companions
        ],
        "wants_transport": draft.wants_transport,
        "lap_exemptions": sorted(draft.lap_exemptions),
        "editing_id": _dump_id(state.editing_id),
        "pending_duplicate_id": _dump_id(state.pending_duplicate_id),
        "held_seats": state.held_seats,
        "declined": state.declined,
        "confirmed_id": _dump_id(state.confirmed_id),
    }


def load_state(data: dict) -> WizardState:
    state = WizardState(
        step=Step(data["step"]),
        editing_id=_load_id(data["editing_id"]),
        pending_duplicate_id=_load_id(data["pending_duplicate_id"]),
        held_seats=data["held_seats"],
        declined=data["declined"],
        confirmed_id=_load_id(data["confirmed_id"]),
    )
    person = data["person"]
    state.apply_update(
        person=(
            Person(
                id=PersonId(UUID(person["id"])),
                name=person["name"],
                department=person["department"],
                role=person["role"],
            )
            if person
            else None
        ),
        document=data["document"],
        attending=data["attending"],
        companions=[Companion(**c) for c in data["companions"]],
        wants_transport=data["wants_transport"],
        lap_exemptions=data["lap_exemptions"],
    )
    return state


def get_state(request: HttpRequest) -> WizardState:
    data = request.session.get(SESSION_KEY)
    return load_state(data) if data else WizardState()


def save_state(request: HttpRequest, state: WizardState) -> None:
    request.session[SESSION_KEY] = dump_state(state)


def reset_state(request: HttpRequest) -> WizardState:
    state = WizardState()
    save_state(request, state)
    return state


def search_counter(request: HttpRequest) -> CacheSearchCounter:
    """Search generation for this visitor. Reading it leaves the wizard state alone."""
    session = request.session
    if session.session_key is None:
        # First contact: create the session so the cookie binds later requests.
        session.save()
        session.modified = True
    return CacheSearchCounter(session.session_key, settings.SESSION_COOKIE_AGE)
