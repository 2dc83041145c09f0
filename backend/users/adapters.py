"""
Custom allauth adapter for Google sign-in.

Connects a Google account to an existing user with the same email and marks
accounts created through Google as social accounts.
"""

import logging

from allauth.socialaccount.adapter import DefaultSocialAccountAdapter
from django.contrib.auth import get_user_model

logger = logging.getLogger(__name__)
User = get_user_model()


class CustomSocialAccountAdapter(DefaultSocialAccountAdapter):

    def pre_social_login(self, request, sociallogin):
        """
        Attach the incoming social login to an existing user with the same
        email, so signing in with Google never creates a duplicate account.
        """
        if sociallogin.is_existing:
            return

        email = sociallogin.user.email
        if not email:
            logger.warning(
                "Social login attempt with missing email address",
                extra={
                    "provider": sociallogin.account.provider,
                    "action": "social_login_pre_processing",
                    "component": "CustomSocialAccountAdapter",
                    "issue": "missing_email",
                    "severity": "medium",
                },
            )
            return

        existing_user = User.objects.filter(email__iexact=email).first()
        if existing_user is None:
            sociallogin.user.is_social_account = True
            return

        sociallogin.connect(request, existing_user)
        if not existing_user.is_social_account:
            existing_user.is_social_account = True
            existing_user.save(update_fields=["is_social_account"])

        logger.info(
            "Connected social account to existing user",
            extra={
                "user_id": existing_user.id,
                "provider": sociallogin.account.provider,
                "action": "social_account_connected",
                "component": "CustomSocialAccountAdapter",
            },
        )

    def save_user(self, request, sociallogin, form=None):
        user = super().save_user(request, sociallogin, form)
        user.is_social_account = True
        user.is_active = True
        user.save(update_fields=["is_social_account", "is_active"])

        logger.info(
            "Social user created",
            extra={
                "user_id": user.id,
                "provider": sociallogin.account.provider,
                "action": "social_user_save_success",
                "component": "CustomSocialAccountAdapter",
            },
        )
        return user
