"""Django signals for cache invalidation."""

from django.core.cache import cache
from django.db import transaction
from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from rsvp.models import Confirmation
from rsvp.stores.django_store import SEATS_SOLD_CACHE_KEY


def _forget_seats_sold() -> None:
    cache.delete(SEATS_SOLD_CACHE_KEY)


@receiver([post_save, post_delete], sender=Confirmation)
def invalidate_seats_sold_cache(sender, instance, **kwargs):
    """Invalidate the seats sold total when a confirmation is saved or deleted.

    Cleared again on commit so a read racing the open transaction is not kept.
    """
    _forget_seats_sold()
    transaction.on_commit(_forget_seats_sold)
