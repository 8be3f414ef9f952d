"""End-to-end tests for the wizard HTTP API.

Run with: pytest tests/test_wizard_api.py -v
"""

import pytest

from rsvp import models
from rsvp.stores.django_store import DjangoRsvpStore

PAYMENT_URL = "https://pay.example.com/party"

PEDRO = {"name": "Pedro Souza", "age": 8, "document": "98.765.432-1"}
MARIA = {"name": "Maria Souza", "age": 30, "document": "12.345.678-9"}


@pytest.fixture(autouse=True)
def rsvp_settings(settings):
    settings.RSVP_TRANSPORT_CAPACITY = 10
    settings.RSVP_PAYMENT_URL = PAYMENT_URL
    settings.RSVP_REDIRECT_COUNTDOWN = 6
    return settings


@pytest.fixture
def ana_row(db) -> models.Person:
    return models.Person.objects.create(name="Ana Martins", department="Finance")


def post(client, path, data=None):
    return client.post(f"/api/wizard{path}", data or {}, format="json")


def walk_to_transport(client, person, companions=()):
    assert post(client, "/person", {"person_id": str(person.id)}).status_code == 200
    assert post(client, "/identity", {"document": "MG1234567"}).status_code == 200
    assert post(client, "/attendance", {"attending": True}).status_code == 200
    response = post(client, "/companions", {"companions": list(companions)})
    assert response.status_code == 200
    assert response.data["step"] == "transport"


def walk_to_summary(client, person, companions=(), transport=False):
    walk_to_transport(client, person, companions)
    response = post(client, "/transport", {"wants_transport": transport})
    assert response.status_code == 200
    return response


@pytest.mark.django_db
class TestWizardFlow:
    def test_new_wizard_starts_at_identify(self, api_client):
        response = post(api_client, "")
        assert response.status_code == 201
        assert response.data["step"] == "identify"
        assert response.data["step_number"] == 1
        assert response.data["draft"]["person"] is None
        assert response.data["outcome"] is None

    def test_state_survives_between_requests(self, api_client, ana_row):
        post(api_client, "/person", {"person_id": str(ana_row.id)})
        response = api_client.get("/api/wizard")
        assert response.data["draft"]["person"]["name"] == "Ana Martins"

    def test_search_people(self, api_client, ana_row):
        response = api_client.get("/api/wizard/people", {"q": "mart"})
        assert response.status_code == 200
        assert response.data["generation"] == 1
        assert response.data["stale"] is False
        assert [p["name"] for p in response.data["results"]] == ["Ana Martins"]

    def test_generation_advances_within_a_session(self, api_client, ana_row):
        api_client.get("/api/wizard/people", {"q": "an"})
        response = api_client.get("/api/wizard/people", {"q": "ana"})
        assert response.data["generation"] == 2

    def test_confirm_with_child_and_transport(self, api_client, ana_row):
        """A child with transport ends on the payment outcome."""
        response = walk_to_summary(api_client, ana_row, [PEDRO], transport=True)
        assert response.data["step"] == "summary"
        assert response.data["draft"]["costs"]["total"] == "180.27"
        assert response.data["draft"]["has_document"] is True
        assert "document" not in response.data["draft"]

        response = post(api_client, "/submit")
        assert response.status_code == 200
        assert response.data["step"] == "success"
        assert response.data["outcome"] == {
            "kind": "payment",
            "first_name": "Ana",
            "total": "180.27",
            "payment_url": PAYMENT_URL,
            "redirect_countdown": 6,
        }

        row = models.Confirmation.objects.get(person=ana_row)
        assert row.transport_seats == 2
        assert [c.name for c in row.companions.all()] == ["Pedro Souza"]

    def test_alone_without_transport_is_free(self, api_client, ana_row):
        walk_to_summary(api_client, ana_row)
        response = post(api_client, "/submit")
        assert response.data["outcome"]["kind"] == "free"
        assert response.data["outcome"]["payment_url"] is None

    def test_declining_writes_nothing(self, api_client, ana_row):
        """Declining goes straight to the farewell."""
        post(api_client, "/person", {"person_id": str(ana_row.id)})
        post(api_client, "/identity", {"document": "MG1234567"})
        response = post(api_client, "/attendance", {"attending": False})
        assert response.data["step"] == "success"
        assert response.data["outcome"]["kind"] == "declined"
        assert not models.Confirmation.objects.exists()

    def test_lap_exemption_saves_a_seat(self, api_client, ana_row):
        toddler = {"name": "Bia Souza", "age": 4, "document": "11.222.333-4"}
        walk_to_transport(api_client, ana_row, [toddler])
        response = post(
            api_client, "/transport", {"wants_transport": True, "lap_exemptions": [0]}
        )
        assert response.status_code == 200
        assert response.data["draft"]["costs"]["transport_seats"] == 1
        assert response.data["draft"]["lap_exemptions"] == [0]

    def test_transport_availability(self, api_client, ana_row):
        walk_to_transport(api_client, ana_row, [PEDRO, MARIA])
        response = api_client.get("/api/wizard/transport")
        assert response.data == {
            "capacity": 10,
            "seats_available": 10,
            "seats_needed": 3,
        }

    def test_back_from_companions(self, api_client, ana_row):
        post(api_client, "/person", {"person_id": str(ana_row.id)})
        post(api_client, "/identity", {"document": "MG1234567"})
        post(api_client, "/attendance", {"attending": True})
        response = post(api_client, "/back")
        assert response.data["step"] == "attendance"
        assert response.data["can_go_back"] is True

    def test_editing_companions_updates_costs(self, api_client, ana_row):
        post(api_client, "/person", {"person_id": str(ana_row.id)})
        post(api_client, "/identity", {"document": "MG1234567"})
        post(api_client, "/attendance", {"attending": True})
        response = api_client.put(
            "/api/wizard/companions", {"companions": [MARIA, PEDRO]}, format="json"
        )
        assert response.status_code == 200
        assert response.data["step"] == "companions"
        assert response.data["draft"]["costs"]["total"] == "155.67"
        assert [c["category"] for c in response.data["draft"]["companions"]] == [
            "adult",
            "child",
        ]


@pytest.mark.django_db
class TestEditFlow:
    @pytest.fixture
    def confirmed(self, api_client, ana_row):
        walk_to_summary(api_client, ana_row, [PEDRO], transport=True)
        post(api_client, "/submit")
        post(api_client, "")
        return ana_row

    def test_duplicate_is_flagged(self, api_client, confirmed):
        response = post(api_client, "/person", {"person_id": str(confirmed.id)})
        assert response.data["duplicate_pending"] is True
        response = post(api_client, "/identity", {"document": "MG1234567"})
        assert response.status_code == 409
        assert response.data["error"]["code"] == "DUPLICATE_PENDING"

    def test_wrong_document_is_forbidden(self, api_client, confirmed):
        post(api_client, "/person", {"person_id": str(confirmed.id)})
        response = post(api_client, "/duplicate/verify", {"document": "MG7654321"})
        assert response.status_code == 403
        assert response.data["error"]["code"] == "DOCUMENT_MISMATCH"
        assert response.data["error"]["retryable"] is True
        assert api_client.get("/api/wizard").data["step"] == "identify"

    def test_edit_updates_in_place(self, api_client, confirmed):
        post(api_client, "/person", {"person_id": str(confirmed.id)})
        response = post(api_client, "/duplicate/verify", {"document": "MG1234567"})
        assert response.data["edit_mode"] is True
        assert response.data["step"] == "attendance"
        assert [c["name"] for c in response.data["draft"]["companions"]] == [
            "Pedro Souza"
        ]

        post(api_client, "/attendance", {"attending": True})
        post(api_client, "/companions", {"companions": [MARIA]})
        post(api_client, "/transport", {"wants_transport": False})
        response = post(api_client, "/submit")
        assert response.status_code == 200

        row = models.Confirmation.objects.get(person=confirmed)
        assert models.Confirmation.objects.count() == 1
        assert row.wants_transport is False
        assert row.total_adults == 1
        assert [c.name for c in row.companions.all()] == ["Maria Souza"]

    def test_cancel_clears_selection(self, api_client, confirmed):
        post(api_client, "/person", {"person_id": str(confirmed.id)})
        response = post(api_client, "/duplicate/cancel")
        assert response.data["draft"]["person"] is None
        assert response.data["duplicate_pending"] is False


@pytest.mark.django_db
class TestErrorMapping:
    def test_invalid_person_id(self, api_client):
        response = post(api_client, "/person", {"person_id": "not-a-uuid"})
        assert response.status_code == 400
        assert response.data["error"]["code"] == "INVALID_ID"

    def test_unknown_person(self, api_client):
        response = post(
            api_client, "/person", {"person_id": "6f1c1f1e-0000-4000-8000-000000000000"}
        )
        assert response.status_code == 404
        assert response.data["error"]["code"] == "PERSON_NOT_FOUND"

    def test_short_document(self, api_client, ana_row):
        post(api_client, "/person", {"person_id": str(ana_row.id)})
        response = post(api_client, "/identity", {"document": "1234"})
        assert response.status_code == 400
        assert response.data["error"]["field"] == "document"

    def test_step_out_of_order(self, api_client):
        response = post(api_client, "/submit")
        assert response.status_code == 409
        assert response.data["error"]["code"] == "INVALID_STEP"

    def test_too_many_adults(self, api_client, ana_row):
        post(api_client, "/person", {"person_id": str(ana_row.id)})
        post(api_client, "/identity", {"document": "MG1234567"})
        post(api_client, "/attendance", {"attending": True})
        response = post(api_client, "/companions", {"companions": [MARIA] * 3})
        assert response.status_code == 400
        assert response.data["error"]["code"] == "VALIDATION_FAILED"
        assert response.data["error"]["field"] == "companions"

    def test_transport_sold_out(self, api_client, ana_row, rsvp_settings):
        rsvp_settings.RSVP_TRANSPORT_CAPACITY = 1
        walk_to_transport(api_client, ana_row, [PEDRO])
        response = post(api_client, "/transport", {"wants_transport": True})
        assert response.status_code == 409
        assert response.data["error"]["code"] == "INSUFFICIENT_SEATS"

    def test_malformed_payload(self, api_client):
        response = post(api_client, "/attendance", {"attending": "maybe"})
        assert response.status_code == 400
        assert "attending" in response.data


@pytest.mark.django_db
class TestOverlappingSearches:
    """A search still running when another request arrives for the same visitor."""

    @pytest.fixture
    def during_search(self, monkeypatch):
        """Run ``hooks[query]`` inside the store call for that query."""
        hooks = {}
        original = DjangoRsvpStore.search_people

        def search_people(store, query, limit):
            hook = hooks.pop(query, None)
            if hook:
                hook()
            return original(store, query, limit)

        monkeypatch.setattr(DjangoRsvpStore, "search_people", search_people)
        return hooks

    def test_slow_search_keeps_concurrent_selection(
        self, api_client, ana_row, during_search
    ):
        post(api_client, "")
        during_search["mar"] = lambda: post(
            api_client, "/person", {"person_id": str(ana_row.id)}
        )

        response = api_client.get("/api/wizard/people", {"q": "mar"})

        assert response.status_code == 200
        state = api_client.get("/api/wizard").data
        assert state["draft"]["person"]["name"] == "Ana Martins"

    def test_slow_search_keeps_concurrent_identity(
        self, api_client, ana_row, during_search
    ):
        post(api_client, "/person", {"person_id": str(ana_row.id)})
        during_search["mar"] = lambda: post(
            api_client, "/identity", {"document": "MG1234567"}
        )

        api_client.get("/api/wizard/people", {"q": "mar"})

        state = api_client.get("/api/wizard").data
        assert state["step"] == "attendance"
        assert state["draft"]["has_document"] is True

    def test_superseded_search_is_dropped(self, api_client, ana_row, during_search):
        post(api_client, "")
        newer = {}
        during_search["an"] = lambda: newer.update(
            response=api_client.get("/api/wizard/people", {"q": "ana"})
        )

        older = api_client.get("/api/wizard/people", {"q": "an"})

        assert older.data["stale"] is True
        assert older.data["results"] == []
        latest = newer["response"].data
        assert latest["generation"] == older.data["generation"] + 1
        assert latest["stale"] is False
        assert [p["name"] for p in latest["results"]] == ["Ana Martins"]
