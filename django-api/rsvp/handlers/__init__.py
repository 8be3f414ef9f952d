from rsvp.handlers.views import (
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

__all__ = [
    "WizardStateView",
    "PersonSearchView",
    "PersonSelectionView",
    "DuplicateVerifyView",
    "DuplicateCancelView",
    "IdentityView",
    "AttendanceView",
    "CompanionsView",
    "TransportView",
    "LapExemptionView",
    "BackView",
    "SubmitView",
]
