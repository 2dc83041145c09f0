import logging

from django.core.exceptions import ValidationError
from django.db import transaction as db_transaction

from .models import RoleAssignment, UserProfile, canonical_role

logger = logging.getLogger(__name__)


class RoleService:
    """Grants and revokes entries of the role policy table."""

    @staticmethod
    def _normalize_role(role):
        role = canonical_role(role)
        if not role:
            raise ValidationError({"role": "Role name cannot be empty."})
        return role

    @staticmethod
    @db_transaction.atomic
    def grant_role(user, role, granted_by=None):
        """
        Grant ``role`` to ``user``; re-activates a previously revoked grant.

        Returns:
            tuple: (RoleAssignment, created)
        """
        role = RoleService._normalize_role(role)
        assignment, created = RoleAssignment.objects.get_or_create(
            user=user,
            role=role,
            defaults={"granted_by": granted_by, "is_active": True},
        )
        if not created and not assignment.is_active:
            assignment.is_active = True
            assignment.granted_by = granted_by
            assignment.save(update_fields=["is_active", "granted_by"])

        logger.info(
            "Role granted",
            extra={
                "user_id": user.id,
                "role": role,
                "granted_by_id": granted_by.id if granted_by else None,
                "created": created,
                "action": "role_granted",
                "component": "RoleService",
            },
        )
        return assignment, created

    @staticmethod
    @db_transaction.atomic
    def revoke_role(user, role):
        """
        Deactivate ``role`` for ``user``.

        Returns:
            bool: True when an active grant was revoked
        """
        role = RoleService._normalize_role(role)
        updated = RoleAssignment.objects.filter(
            user=user, role=role, is_active=True
        ).update(is_active=False)

        if updated:
            logger.info(
                "Role revoked",
                extra={
                    "user_id": user.id,
                    "role": role,
                    "action": "role_revoked",
                    "component": "RoleService",
                },
            )
        else:
            logger.warning(
                "Role revoke requested for a user without that role",
                extra={
                    "user_id": user.id,
                    "role": role,
                    "action": "role_revoke_noop",
                    "component": "RoleService",
                    "severity": "low",
                },
            )
        return bool(updated)

    @staticmethod
    def has_role(user, role):
        """True when ``user`` holds ``role``; names compare case-insensitively."""
        role = canonical_role(role)
        if not role or user is None or not user.is_authenticated:
            return False
        return RoleAssignment.objects.filter(
            user=user, role=role, is_active=True
        ).exists()


class ProfileService:
    """Reads and writes the single profile row of a user."""

    FIELDS = ("name", "age", "current_work", "description")

    @staticmethod
    def get_profile(user):
        """Stored profile, or an unsaved empty one when the user has none yet."""
        return UserProfile.objects.filter(user=user).first() or UserProfile(user=user)

    @staticmethod
    def save_profile(user, data, partial=False):
        """
        Create or update the profile of ``user``.

        A full save resets every field missing from ``data`` to null; a partial
        save touches only the given fields and needs at least one of them.
        """
        if partial:
            values = {field: data[field] for field in ProfileService.FIELDS if field in data}
            if not values:
                raise ValidationError({"profile": "No valid profile fields provided."})
        else:
            values = {field: data.get(field) for field in ProfileService.FIELDS}

        profile, created = UserProfile.objects.update_or_create(user=user, defaults=values)

        logger.info(
            "User profile saved",
            extra={
                "user_id": user.id,
                "created": created,
                "fields": sorted(values),
                "partial": partial,
                "action": "profile_saved",
                "component": "ProfileService",
            },
        )
        return profile
