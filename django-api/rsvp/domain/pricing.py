"""Cost calculator for daily passes and transport seats.

The registrant's daily pass is free, but the registrant always takes a
transport seat when transport is wanted.
"""

from collections.abc import Iterable, Sequence
from decimal import Decimal

from rsvp.domain.models import Companion, CostBreakdown
from rsvp.domain.value_objects import Money

ADULT_DAILY_PASS = Money(Decimal("103.78"))
CHILD_DAILY_PASS = Money(Decimal("51.89"))
TRANSPORT_SEAT = Money(Decimal("64.19"))

LAP_MAX_AGE = 5


def is_lap_eligible(companion: Companion) -> bool:
    return companion.age <= LAP_MAX_AGE


def count_transport_seats(
    companions: Sequence[Companion], lap_exemptions: Iterable[int] = ()
) -> int:
    """Seats needed: the registrant plus every companion not riding on a lap."""
    on_lap = frozenset(lap_exemptions)
    seats = 1
    for index, companion in enumerate(companions):
        if not (is_lap_eligible(companion) and index in on_lap):
            seats += 1
    return seats


def calculate_costs(
    companions: Sequence[Companion],
    wants_transport: bool,
    lap_exemptions: Iterable[int] = (),
) -> CostBreakdown:
    """Return the cost breakdown for a roster of companions.

    Pure function of its inputs. Callers recompute on every change instead of
    patching a previous breakdown.
    """
    adult_passes = sum(1 for companion in companions if companion.is_adult)
    child_passes = len(companions) - adult_passes
    daily_passes_cost = (
        ADULT_DAILY_PASS * adult_passes + CHILD_DAILY_PASS * child_passes
    )

    transport_seats = 0
    transport_cost = Money.zero()
    if wants_transport:
        transport_seats = count_transport_seats(companions, lap_exemptions)
        transport_cost = TRANSPORT_SEAT * transport_seats

    return CostBreakdown(
        adult_passes=adult_passes,
        child_passes=child_passes,
        daily_passes_cost=daily_passes_cost,
        transport_seats=transport_seats,
        transport_cost=transport_cost,
    )
