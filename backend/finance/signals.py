import logging

from django.conf import settings
from django.db.models.signals import post_save
from django.dispatch import receiver

from .models import UserSettings

logger = logging.getLogger(__name__)


@receiver(post_save, sender=settings.AUTH_USER_MODEL)
def create_user_settings(sender, instance, created, **kwargs):
    """
    Signal to automatically create UserSettings when a new user is created.
    """
    if not created:
        return

    user_settings, _ = UserSettings.objects.get_or_create(
        user=instance, defaults={"currency": settings.DEFAULT_CURRENCY}
    )
    logger.info(
        "UserSettings created for new user",
        extra={
            "user_id": instance.id,
            "currency": user_settings.currency,
            "language": user_settings.language,
            "action": "user_settings_created",
            "component": "create_user_settings",
        },
    )
