from rsvp.domain.models import (
    Companion,
    CompanionCategory,
    ConfirmationFields,
    CostBreakdown,
    ExistingConfirmation,
    Person,
)
from rsvp.domain.value_objects import Capacity, ConfirmationId, Money, PersonId

__all__ = [
    "Person",
    "Companion",
    "CompanionCategory",
    "CostBreakdown",
    "ExistingConfirmation",
    "ConfirmationFields",
    "PersonId",
    "ConfirmationId",
    "Money",
    "Capacity",
]
