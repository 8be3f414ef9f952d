"""Django ORM implementation of the RsvpStore."""

import hmac
import logging
from collections.abc import Sequence
from contextlib import AbstractContextManager

from django.core.cache import cache
from django.db import DatabaseError, IntegrityError, transaction
from django.db.models import Sum
from django.db.models.functions import Coalesce

from rsvp import models
from rsvp.domain import (
    Companion,
    ConfirmationFields,
    ConfirmationId,
    ExistingConfirmation,
    Person,
    PersonId,
)
from rsvp.domain.errors import AlreadyConfirmedError, StoreReadError, StoreWriteError
from rsvp.stores.interfaces import RsvpStore, SearchCounter

logger = logging.getLogger(__name__)

SEATS_SOLD_CACHE_KEY = "confirmations:seats_sold"
SEATS_SOLD_CACHE_TIMEOUT = 60
SEARCH_GENERATION_CACHE_KEY = "wizard:{session_key}:search_generation"


def _to_person(row: models.Person) -> Person:
    return Person(
        id=PersonId(row.id), name=row.name, department=row.department, role=row.role
    )


def _to_companion(row: models.Companion) -> Companion:
    return Companion(name=row.name, age=row.age, document=row.document)


def _columns(fields: ConfirmationFields) -> dict:
    return {
        "person_id": fields.person_id.value,
        "person_name": fields.person_name,
        "department": fields.department,
        "document": fields.document,
        "has_companions": fields.has_companions,
        "wants_transport": fields.wants_transport,
        "total_adults": fields.total_adults,
        "total_children": fields.total_children,
        "total_daily_passes": fields.total_daily_passes,
        "transport_seats": fields.transport_seats,
        "total_cost": fields.total_cost.amount,
    }


class DjangoRsvpStore(RsvpStore):
    """PostgreSQL-backed store using Django ORM."""

    def search_people(self, query: str, limit: int) -> list[Person]:
        try:
            rows = models.Person.objects.filter(name__icontains=query).order_by("name")
            return [_to_person(row) for row in rows[:limit]]
        except DatabaseError as exc:
            logger.exception("Person search failed")
            raise StoreReadError("search_people") from exc

    def get_person(self, person_id: PersonId) -> Person | None:
        try:
            row = models.Person.objects.filter(id=person_id.value).first()
        except DatabaseError as exc:
            logger.exception("Person lookup failed")
            raise StoreReadError("get_person") from exc
        return _to_person(row) if row else None

    def find_confirmation_by_person(
        self, person_id: PersonId
    ) -> ExistingConfirmation | None:
        try:
            row = (
                models.Confirmation.objects.prefetch_related("companions")
                .filter(person_id=person_id.value)
                .first()
            )
            if row is None:
                return None
            companions = tuple(_to_companion(c) for c in row.companions.all())
        except DatabaseError as exc:
            logger.exception("Confirmation lookup failed")
            raise StoreReadError("find_confirmation_by_person") from exc

        return ExistingConfirmation(
            id=ConfirmationId(row.id),
            person_id=person_id,
            wants_transport=row.wants_transport,
            transport_seats=row.transport_seats,
            companions=companions,
        )

    def document_matches(self, confirmation_id: ConfirmationId, candidate: str) -> bool:
        try:
            stored = (
                models.Confirmation.objects.filter(id=confirmation_id.value)
                .values_list("document", flat=True)
                .first()
            )
        except DatabaseError as exc:
            logger.exception("Document check failed")
            raise StoreReadError("document_matches") from exc
        if stored is None:
            return False
        return hmac.compare_digest(stored.strip().encode(), candidate.strip().encode())

    def sum_seats_sold(self) -> int:
        total = cache.get(SEATS_SOLD_CACHE_KEY)
        if total is not None:
            return total
        try:
            total = models.Confirmation.objects.aggregate(
                total=Coalesce(Sum("transport_seats"), 0)
            )["total"]
        except DatabaseError as exc:
            logger.exception("Seat count failed")
            raise StoreReadError("sum_seats_sold") from exc
        cache.set(SEATS_SOLD_CACHE_KEY, total, SEATS_SOLD_CACHE_TIMEOUT)
        return total

    def insert_confirmation(self, fields: ConfirmationFields) -> ConfirmationId:
        try:
            with transaction.atomic():
                row = models.Confirmation.objects.create(**_columns(fields))
        except IntegrityError as exc:
            logger.info("Insert collided with an existing confirmation: %s", exc)
            raise AlreadyConfirmedError() from exc
        except DatabaseError as exc:
            logger.exception("Confirmation insert failed")
            raise StoreWriteError("insert_confirmation") from exc
        return ConfirmationId(row.id)

    def update_confirmation(
        self, confirmation_id: ConfirmationId, fields: ConfirmationFields
    ) -> None:
        try:
            with transaction.atomic():
                row = models.Confirmation.objects.select_for_update().get(
                    id=confirmation_id.value
                )
                for name, value in _columns(fields).items():
                    setattr(row, name, value)
                row.save()
        except (DatabaseError, models.Confirmation.DoesNotExist) as exc:
            logger.exception("Confirmation update failed")
            raise StoreWriteError("update_confirmation") from exc

    def replace_companions(
        self, confirmation_id: ConfirmationId, companions: Sequence[Companion]
    ) -> None:
        try:
            with transaction.atomic():
                models.Companion.objects.filter(
                    confirmation_id=confirmation_id.value
                ).delete()
                models.Companion.objects.bulk_create(
                    models.Companion(
                        confirmation_id=confirmation_id.value,
                        position=position,
                        name=companion.name,
                        age=companion.age,
                        document=companion.document,
                        category=companion.category.value,
                    )
                    for position, companion in enumerate(companions)
                )
        except DatabaseError as exc:
            logger.exception("Companion replace failed")
            raise StoreWriteError("replace_companions") from exc

    def atomic(self) -> AbstractContextManager:
        return transaction.atomic()


class CacheSearchCounter(SearchCounter):
    """Search generation kept in the cache, scoped to one session."""

    def __init__(self, session_key: str, timeout: int) -> None:
        self._key = SEARCH_GENERATION_CACHE_KEY.format(session_key=session_key)
        self._timeout = timeout

    def next_generation(self) -> int:
        cache.add(self._key, 0, self._timeout)
        try:
            return cache.incr(self._key)
        except ValueError:
            # Expired between add and incr.
            cache.set(self._key, 1, self._timeout)
            return 1

    def current_generation(self) -> int:
        return cache.get(self._key, 0)
