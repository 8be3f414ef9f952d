"""Domain models for people, companions and stored confirmations.

These are pure domain objects with no API input rules.
Django ORM models are in rsvp/models.py (persistence layer).
"""

from dataclasses import dataclass
from enum import Enum

from rsvp.domain.value_objects import ConfirmationId, Money, PersonId

# Single threshold used for both pricing and categorisation.
ADULT_MIN_AGE = 13


class CompanionCategory(Enum):
    ADULT = "adult"
    CHILD = "child"


@dataclass(frozen=True)
class Person:
    """Domain representation of a roster entry."""

    id: PersonId
    name: str
    department: str
    role: str = ""

    @property
    def first_name(self) -> str:
        return self.name.split(" ")[0] if self.name else ""


@dataclass(frozen=True)
class Companion:
    """Someone accompanying the registrant."""

    name: str
    age: int
    document: str

    def __post_init__(self) -> None:
        if self.age < 0:
            raise ValueError("Companion age cannot be negative")

    @property
    def category(self) -> CompanionCategory:
        if self.age >= ADULT_MIN_AGE:
            return CompanionCategory.ADULT
        return CompanionCategory.CHILD

    @property
    def is_adult(self) -> bool:
        return self.category is CompanionCategory.ADULT


@dataclass(frozen=True)
class CostBreakdown:
    """Fully derived cost of a draft. Never mutated on its own."""

    adult_passes: int
    child_passes: int
    daily_passes_cost: Money
    transport_seats: int
    transport_cost: Money

    @property
    def total(self) -> Money:
        return self.daily_passes_cost + self.transport_cost

    @property
    def daily_passes(self) -> int:
        return self.adult_passes + self.child_passes

    @classmethod
    def empty(cls) -> "CostBreakdown":
        return cls(
            adult_passes=0,
            child_passes=0,
            daily_passes_cost=Money.zero(),
            transport_seats=0,
            transport_cost=Money.zero(),
        )


@dataclass(frozen=True)
class ExistingConfirmation:
    """A confirmation read back from the store.

    Does not carry the stored document; only the store compares it.
    """

    id: ConfirmationId
    person_id: PersonId
    wants_transport: bool
    transport_seats: int
    companions: tuple[Companion, ...] = ()


@dataclass(frozen=True)
class ConfirmationFields:
    """Column values written for a confirmation on insert or update."""

    person_id: PersonId
    person_name: str
    department: str
    document: str
    wants_transport: bool
    total_adults: int
    total_children: int
    total_daily_passes: int
    transport_seats: int
    total_cost: Money

    @property
    def has_companions(self) -> bool:
        return self.total_adults + self.total_children > 0
