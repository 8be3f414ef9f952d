"""Serializers for request input and for rendering domain models."""

from rest_framework import serializers

from rsvp.domain import Companion
from rsvp.domain.wizard import BACKWARD_STEPS, Step


class SearchQuerySerializer(serializers.Serializer):
    q = serializers.CharField(allow_blank=True, max_length=100)


class PersonSelectionSerializer(serializers.Serializer):
    person_id = serializers.CharField(max_length=64)


class DocumentSerializer(serializers.Serializer):
    document = serializers.CharField(
        allow_blank=True, max_length=64, trim_whitespace=False
    )


class AttendanceSerializer(serializers.Serializer):
    attending = serializers.BooleanField()


class CompanionInputSerializer(serializers.Serializer):
    name = serializers.CharField(allow_blank=True, max_length=255)
    age = serializers.IntegerField(min_value=0, max_value=130)
    document = serializers.CharField(allow_blank=True, max_length=64)


class CompanionListSerializer(serializers.Serializer):
    companions = CompanionInputSerializer(many=True)

    def to_companions(self) -> list[Companion]:
        return [Companion(**item) for item in self.validated_data["companions"]]


class LapExemptionSerializer(serializers.Serializer):
    lap_exemptions = serializers.ListField(
        child=serializers.IntegerField(min_value=0), allow_empty=True
    )


class TransportChoiceSerializer(serializers.Serializer):
    wants_transport = serializers.BooleanField()
    lap_exemptions = serializers.ListField(
        child=serializers.IntegerField(min_value=0), allow_empty=True, required=False
    )


class PersonSerializer(serializers.Serializer):
    """Serializer for Person domain model."""

    id = serializers.UUIDField(source="id.value")
    name = serializers.CharField()
    department = serializers.CharField()


class CompanionSerializer(serializers.Serializer):
    """Serializer for Companion domain model."""

    name = serializers.CharField()
    age = serializers.IntegerField()
    document = serializers.CharField()
    category = serializers.CharField(source="category.value")


class CostBreakdownSerializer(serializers.Serializer):
    """Serializer for CostBreakdown domain model."""

    adult_passes = serializers.IntegerField()
    child_passes = serializers.IntegerField()
    daily_passes_cost = serializers.DecimalField(
        source="daily_passes_cost.amount", max_digits=10, decimal_places=2
    )
    transport_seats = serializers.IntegerField()
    transport_cost = serializers.DecimalField(
        source="transport_cost.amount", max_digits=10, decimal_places=2
    )
    total = serializers.DecimalField(
        source="total.amount", max_digits=10, decimal_places=2
    )


class DraftSerializer(serializers.Serializer):
    """Serializer for the wizard Draft. The document itself is never echoed."""

    person = PersonSerializer(allow_null=True)
    has_document = serializers.SerializerMethodField()
    attending = serializers.BooleanField(allow_null=True)
    companions = CompanionSerializer(many=True)
    wants_transport = serializers.BooleanField(allow_null=True)
    lap_exemptions = serializers.SerializerMethodField()
    costs = CostBreakdownSerializer()

    def get_has_document(self, draft) -> bool:
        return bool(draft.document)

    def get_lap_exemptions(self, draft) -> list[int]:
        return sorted(draft.lap_exemptions)


class OutcomeSerializer(serializers.Serializer):
    """Serializer for the SuccessOutcome shown on the last step."""

    kind = serializers.CharField(source="kind.value")
    first_name = serializers.CharField()
    total = serializers.DecimalField(
        source="total.amount", max_digits=10, decimal_places=2
    )
    payment_url = serializers.CharField(allow_null=True)
    redirect_countdown = serializers.IntegerField(allow_null=True)


class WizardStateSerializer(serializers.Serializer):
    """Serializer for WizardState. Needs the service in context for the outcome."""

    step = serializers.SerializerMethodField()
    step_number = serializers.IntegerField(source="step.value")
    edit_mode = serializers.BooleanField(source="is_edit_mode")
    duplicate_pending = serializers.BooleanField()
    can_go_back = serializers.SerializerMethodField()
    draft = DraftSerializer()
    outcome = serializers.SerializerMethodField()

    def get_step(self, state) -> str:
        return state.step.name.lower()

    def get_can_go_back(self, state) -> bool:
        return state.step in BACKWARD_STEPS

    def get_outcome(self, state) -> dict | None:
        if state.step is not Step.SUCCESS:
            return None
        return OutcomeSerializer(self.context["service"].outcome(state)).data
