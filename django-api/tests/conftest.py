"""Pytest configuration and shared fixtures."""

import uuid

import pytest
from rest_framework.test import APIClient

from memory_store import InMemoryRsvpStore, InMemorySearchCounter
from rsvp.domain import Companion, Person, PersonId
from rsvp.domain.errors import StoreReadError, StoreWriteError
from rsvp.domain.wizard import WizardState
from rsvp.services.wizard_service import WizardService, WizardSettings

PAYMENT_URL = "https://pay.example.com/party"


def make_person(name: str, department: str = "Engineering") -> Person:
    return Person(id=PersonId(uuid.uuid4()), name=name, department=department)


def adult(name: str = "Maria Souza", age: int = 30) -> Companion:
    return Companion(name=name, age=age, document="12.345.678-9")


def child(name: str = "Pedro Souza", age: int = 8) -> Companion:
    return Companion(name=name, age=age, document="98.765.432-1")


class RecordingStore(InMemoryRsvpStore):
    """In-memory store that counts writes and can be told to fail."""

    def __init__(self, people=()) -> None:
        super().__init__(people)
        self.writes = 0
        self.fail_reads = False
        self.fail_companion_writes = False
        self.during_search = None

    def _read(self, operation: str) -> None:
        if self.fail_reads:
            raise StoreReadError(operation)

    def search_people(self, query, limit):
        self._read("search_people")
        if self.during_search:
            self.during_search()
        return super().search_people(query, limit)

    def find_confirmation_by_person(self, person_id):
        self._read("find_confirmation_by_person")
        return super().find_confirmation_by_person(person_id)

    def sum_seats_sold(self):
        self._read("sum_seats_sold")
        return super().sum_seats_sold()

    def insert_confirmation(self, fields):
        self.writes += 1
        return super().insert_confirmation(fields)

    def update_confirmation(self, confirmation_id, fields):
        self.writes += 1
        super().update_confirmation(confirmation_id, fields)

    def replace_companions(self, confirmation_id, companions):
        self.writes += 1
        if self.fail_companion_writes:
            raise StoreWriteError("replace_companions")
        super().replace_companions(confirmation_id, companions)


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture(autouse=True)
def clear_cache():
    from django.core.cache import cache
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def ana() -> Person:
    return make_person("Ana Martins", "Finance")


@pytest.fixture
def carlos() -> Person:
    return make_person("Carlos Vieira", "Operations")


@pytest.fixture
def store(ana: Person, carlos: Person) -> RecordingStore:
    return RecordingStore([ana, carlos, make_person("Mariana Santos")])


@pytest.fixture
def service(store: RecordingStore) -> WizardService:
    return WizardService(
        store,
        WizardSettings(
            transport_capacity=10, payment_url=PAYMENT_URL, redirect_countdown=6
        ),
    )


@pytest.fixture
def state() -> WizardState:
    return WizardState()


@pytest.fixture
def counter() -> InMemorySearchCounter:
    return InMemorySearchCounter()
