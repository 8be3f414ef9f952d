from django.urls import path

from rsvp.handlers import (
    AttendanceView,
    BackView,
    CompanionsView,
    DuplicateCancelView,
    DuplicateVerifyView,
    IdentityView,
    LapExemptionView,
    PersonSearchView,
    PersonSelectionView,
    SubmitView,
    TransportView,
    WizardStateView,
)

urlpatterns = [
    path("wizard", WizardStateView.as_view(), name="wizard"),
    path("wizard/people", PersonSearchView.as_view(), name="wizard-people"),
    path("wizard/person", PersonSelectionView.as_view(), name="wizard-person"),
    path(
        "wizard/duplicate/verify",
        DuplicateVerifyView.as_view(),
        name="wizard-duplicate-verify",
    ),
    path(
        "wizard/duplicate/cancel",
        DuplicateCancelView.as_view(),
        name="wizard-duplicate-cancel",
    ),
    path("wizard/identity", IdentityView.as_view(), name="wizard-identity"),
    path("wizard/attendance", AttendanceView.as_view(), name="wizard-attendance"),
    path("wizard/companions", CompanionsView.as_view(), name="wizard-companions"),
    path("wizard/transport", TransportView.as_view(), name="wizard-transport"),
    path("wizard/transport/lap", LapExemptionView.as_view(), name="wizard-lap"),
    path("wizard/back", BackView.as_view(), name="wizard-back"),
    path("wizard/submit", SubmitView.as_view(), name="wizard-submit"),
]
