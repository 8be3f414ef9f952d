import csv

from django.contrib import admin
from django.db.models import Count, F, Sum
from django.db.models.functions import Coalesce
from django.http import HttpResponse
from django.utils import timezone

from rsvp.models import Companion, Confirmation, Person

CSV_HEADER = [
    "Name",
    "Department",
    "Companions",
    "Transport",
    "Seats",
    "Total",
    "Date",
]


def confirmation_stats(queryset) -> dict:
    """Headline numbers for the dashboard."""
    return queryset.aggregate(
        confirmed=Count("id"),
        guests=Coalesce(Sum(F("total_adults") + F("total_children")), 0),
        seats=Coalesce(Sum("transport_seats"), 0),
    )


class CompanionInline(admin.TabularInline):
    model = Companion
    extra = 0
    fields = ["position", "name", "age", "document", "category"]


@admin.register(Person)
class PersonAdmin(admin.ModelAdmin):
    list_display = ["name", "department", "role"]
    search_fields = ["name", "department"]
    list_filter = ["department"]


@admin.register(Confirmation)
class ConfirmationAdmin(admin.ModelAdmin):
    list_display = [
        "person_name",
        "department",
        "total_adults",
        "total_children",
        "wants_transport",
        "transport_seats",
        "total_cost",
        "embarked",
        "created_at",
    ]
    list_editable = ["embarked"]
    list_filter = ["wants_transport", "has_companions", "embarked", "department"]
    search_fields = ["person_name", "department"]
    readonly_fields = ["created_at", "updated_at"]
    exclude = ["document"]
    inlines = [CompanionInline]
    actions = ["export_csv"]

    def changelist_view(self, request, extra_context=None):
        stats = confirmation_stats(Confirmation.objects.all())
        extra_context = {
            **(extra_context or {}),
            "subtitle": (
                f"{stats['confirmed']} confirmed · {stats['guests']} guests · "
                f"{stats['seats']} transport seats"
            ),
        }
        return super().changelist_view(request, extra_context=extra_context)

    @admin.action(description="Export selected confirmations to CSV")
    def export_csv(self, request, queryset):
        response = HttpResponse(content_type="text/csv; charset=utf-8")
        response["Content-Disposition"] = 'attachment; filename="confirmados.csv"'
        writer = csv.writer(response)
        writer.writerow(CSV_HEADER)
        for confirmation in queryset.order_by("person_name"):
            writer.writerow(
                [
                    confirmation.person_name,
                    confirmation.department,
                    confirmation.total_adults + confirmation.total_children,
                    "Yes" if confirmation.wants_transport else "No",
                    confirmation.transport_seats,
                    f"{confirmation.total_cost:.2f}",
                    timezone.localtime(confirmation.created_at).strftime("%Y-%m-%d"),
                ]
            )
        return response
