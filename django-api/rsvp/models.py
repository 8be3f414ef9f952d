"""Django ORM models (persistence layer).

These models handle database concerns. Domain logic lives in domain/.
"""

import uuid

from django.db import models


class Person(models.Model):
    """Persistence model for the employee roster."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255, unique=True)
    department = models.CharField(max_length=255)
    role = models.CharField(max_length=255, blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["name"]
        verbose_name_plural = "people"

    def __str__(self) -> str:
        return self.name


class Confirmation(models.Model):
    """Persistence model for an RSVP. One per person."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    person = models.OneToOneField(
        Person, on_delete=models.PROTECT, related_name="confirmation"
    )
    person_name = models.CharField(max_length=255)
    department = models.CharField(max_length=255)
    document = models.CharField(max_length=64)
    has_companions = models.BooleanField(default=False)
    wants_transport = models.BooleanField(default=False)
    total_adults = models.PositiveSmallIntegerField(default=0)
    total_children = models.PositiveSmallIntegerField(default=0)
    total_daily_passes = models.PositiveSmallIntegerField(default=0)
    transport_seats = models.PositiveSmallIntegerField(default=0)
    total_cost = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    embarked = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(
                fields=["-created_at"], name="rsvp_confirmation_created_idx"
            ),
        ]

    def __str__(self) -> str:
        return self.person_name


class Companion(models.Model):
    """Persistence model for a companion of a confirmation."""

    class Category(models.TextChoices):
        ADULT = "adult", "Adult"
        CHILD = "child", "Child"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    confirmation = models.ForeignKey(
        Confirmation, on_delete=models.CASCADE, related_name="companions"
    )
    position = models.PositiveSmallIntegerField()
    name = models.CharField(max_length=255)
    age = models.PositiveSmallIntegerField()
    document = models.CharField(max_length=64)
    category = models.CharField(max_length=5, choices=Category.choices)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["position"]
        constraints = [
            models.UniqueConstraint(
                fields=["confirmation", "position"],
                name="unique_companion_position",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.name} ({self.age})"
