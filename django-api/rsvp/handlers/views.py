"""HTTP handlers (views) - handle HTTP concerns only.

Handlers:
- Parse requests and validate input format
- Load and save the wizard state from the session
- Call services for business logic
- Map domain errors to HTTP responses
- Never expose internal error details
"""

import logging

from django.conf import settings
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from rsvp.domain.errors import DomainError, DraftValidationError, ErrorCode
from rsvp.domain.wizard import WizardState, seats_needed
from rsvp.handlers import serializers
from rsvp.handlers.session import get_state, reset_state, save_state, search_counter
from rsvp.services.wizard_service import WizardService, WizardSettings
from rsvp.stores.django_store import DjangoRsvpStore

logger = logging.getLogger(__name__)

ERROR_STATUS = {
    ErrorCode.PERSON_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.INVALID_ID: status.HTTP_400_BAD_REQUEST,
    ErrorCode.VALIDATION_FAILED: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_STEP: status.HTTP_409_CONFLICT,
    ErrorCode.DUPLICATE_PENDING: status.HTTP_409_CONFLICT,
    ErrorCode.DOCUMENT_MISMATCH: status.HTTP_403_FORBIDDEN,
    ErrorCode.INSUFFICIENT_SEATS: status.HTTP_409_CONFLICT,
    ErrorCode.ALREADY_CONFIRMED: status.HTTP_409_CONFLICT,
    ErrorCode.STORE_READ_FAILED: status.HTTP_503_SERVICE_UNAVAILABLE,
    ErrorCode.STORE_WRITE_FAILED: status.HTTP_503_SERVICE_UNAVAILABLE,
}

RETRYABLE = frozenset(
    {
        ErrorCode.DOCUMENT_MISMATCH,
        ErrorCode.STORE_READ_FAILED,
        ErrorCode.STORE_WRITE_FAILED,
    }
)


def get_wizard_service() -> WizardService:
    return WizardService(
        DjangoRsvpStore(),
        WizardSettings(
            transport_capacity=settings.RSVP_TRANSPORT_CAPACITY,
            min_document_length=settings.RSVP_MIN_DOCUMENT_LENGTH,
            search_limit=settings.RSVP_SEARCH_LIMIT,
            payment_url=settings.RSVP_PAYMENT_URL,
            redirect_countdown=settings.RSVP_REDIRECT_COUNTDOWN,
        ),
    )


def error_response(exc: DomainError) -> Response:
    body = {"code": exc.code.value, "message": exc.message}
    if isinstance(exc, DraftValidationError):
        body["field"] = exc.field
    if exc.code in RETRYABLE:
        body["retryable"] = True
    return Response({"error": body}, status=ERROR_STATUS[exc.code])


class WizardView(APIView):
    """Base for wizard endpoints: domain errors become error responses."""

    def initial(self, request: Request, *args, **kwargs) -> None:
        super().initial(request, *args, **kwargs)
        self.service = get_wizard_service()

    def handle_exception(self, exc: Exception) -> Response:
        if isinstance(exc, DomainError):
            logger.info("Wizard request rejected: %s", exc)
            return error_response(exc)
        return super().handle_exception(exc)

    def state_response(
        self,
        request: Request,
        state: WizardState,
        status_code: int = status.HTTP_200_OK,
    ) -> Response:
        save_state(request, state)
        data = serializers.WizardStateSerializer(
            state, context={"service": self.service}
        ).data
        return Response(data, status=status_code)


class WizardStateView(WizardView):
    """Handler for GET/POST /api/wizard"""

    def get(self, request: Request) -> Response:
        return self.state_response(request, get_state(request))

    def post(self, request: Request) -> Response:
        return self.state_response(
            request, reset_state(request), status.HTTP_201_CREATED
        )


class PersonSearchView(WizardView):
    """Handler for GET /api/wizard/people?q="""

    def get(self, request: Request) -> Response:
        query = serializers.SearchQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        suggestions = self.service.search_people(
            search_counter(request), query.validated_data["q"]
        )
        return Response(
            {
                "generation": suggestions.generation,
                "stale": suggestions.stale,
                "results": serializers.PersonSerializer(
                    suggestions.people, many=True
                ).data,
            }
        )


class PersonSelectionView(WizardView):
    """Handler for POST /api/wizard/person"""

    def post(self, request: Request) -> Response:
        payload = serializers.PersonSelectionSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        state = get_state(request)
        self.service.select_person(state, payload.validated_data["person_id"])
        return self.state_response(request, state)


class DuplicateVerifyView(WizardView):
    """Handler for POST /api/wizard/duplicate/verify"""

    def post(self, request: Request) -> Response:
        payload = serializers.DocumentSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        state = get_state(request)
        self.service.verify_document(state, payload.validated_data["document"])
        return self.state_response(request, state)


class DuplicateCancelView(WizardView):
    """Handler for POST /api/wizard/duplicate/cancel"""

    def post(self, request: Request) -> Response:
        state = get_state(request)
        self.service.cancel_duplicate(state)
        return self.state_response(request, state)


class IdentityView(WizardView):
    """Handler for POST /api/wizard/identity"""

    def post(self, request: Request) -> Response:
        payload = serializers.DocumentSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        state = get_state(request)
        self.service.confirm_identity(state, payload.validated_data["document"])
        return self.state_response(request, state)


class AttendanceView(WizardView):
    """Handler for POST /api/wizard/attendance"""

    def post(self, request: Request) -> Response:
        payload = serializers.AttendanceSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        state = get_state(request)
        self.service.choose_attendance(state, payload.validated_data["attending"])
        return self.state_response(request, state)


class CompanionsView(WizardView):
    """Handler for PUT (edit) and POST (edit and continue) /api/wizard/companions"""

    def put(self, request: Request) -> Response:
        payload = serializers.CompanionListSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        state = get_state(request)
        self.service.update_companions(state, payload.to_companions())
        return self.state_response(request, state)

    def post(self, request: Request) -> Response:
        state = get_state(request)
        companions = None
        if "companions" in request.data:
            payload = serializers.CompanionListSerializer(data=request.data)
            payload.is_valid(raise_exception=True)
            companions = payload.to_companions()
        self.service.confirm_companions(state, companions)
        return self.state_response(request, state)


class TransportView(WizardView):
    """Handler for GET (availability) and POST (choice) /api/wizard/transport"""

    def get(self, request: Request) -> Response:
        state = get_state(request)
        return Response(
            {
                "capacity": self.service.settings.transport_capacity,
                "seats_available": self.service.seats_available(state),
                "seats_needed": seats_needed(state),
            }
        )

    def post(self, request: Request) -> Response:
        payload = serializers.TransportChoiceSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        state = get_state(request)
        self.service.choose_transport(
            state,
            payload.validated_data["wants_transport"],
            payload.validated_data.get("lap_exemptions"),
        )
        return self.state_response(request, state)


class LapExemptionView(WizardView):
    """Handler for PUT /api/wizard/transport/lap"""

    def put(self, request: Request) -> Response:
        payload = serializers.LapExemptionSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        state = get_state(request)
        self.service.set_lap_exemptions(state, payload.validated_data["lap_exemptions"])
        return self.state_response(request, state)


class BackView(WizardView):
    """Handler for POST /api/wizard/back"""

    def post(self, request: Request) -> Response:
        state = get_state(request)
        self.service.go_back(state)
        return self.state_response(request, state)


class SubmitView(WizardView):
    """Handler for POST /api/wizard/submit"""

    def post(self, request: Request) -> Response:
        state = get_state(request)
        self.service.submit(state)
        return self.state_response(request, state)
