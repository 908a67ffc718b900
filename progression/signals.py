"""
PROGRESSION App - Django Signals

Every new user starts with an empty badge summary (tier none, 0 badges).
"""

import logging

from django.conf import settings
from django.db.models.signals import post_save
from django.dispatch import receiver

from progression.models import BadgeBenefits

logger = logging.getLogger(__name__)


@receiver(post_save, sender=settings.AUTH_USER_MODEL)
def create_badge_benefits(sender, instance, created, **kwargs):
    """Create the zero-state BadgeBenefits row for a new user."""
    if not created:
        return

    _, row_created = BadgeBenefits.objects.get_or_create(user=instance)
    if row_created:
        logger.info(f"[SIGNAL] Badge benefits initialized for {instance.pk}")
