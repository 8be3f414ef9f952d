from django.apps import AppConfig


class RsvpConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "rsvp"
    verbose_name = "RSVP"

    def ready(self) -> None:
        from rsvp import signals  # noqa: F401
