"""
User models for the personal ledger application.

CustomUser identifies people by email so Google sign-in can create accounts
without a password or username. RoleAssignment is the authorization policy
table consulted by the admin endpoints.
"""

from django.conf import settings
from django.contrib.auth.models import AbstractUser
from django.core.validators import MaxValueValidator
from django.db import models


def canonical_role(role):
    """Stored form of a role name: trimmed and lower-case."""
    return (role or "").strip().lower()


class CustomUser(AbstractUser):
    """
    Custom user model extending Django's AbstractUser.

    Supports Google OAuth registration, where username and password may be
    missing.
    """

    email = models.EmailField(
        unique=True,
        blank=False,
        help_text="User's unique email address, required for all accounts",
    )

    username = models.CharField(
        max_length=150,
        unique=True,
        null=True,
        blank=True,
        help_text="Optional username, can be null for Google registration",
    )

    password = models.CharField(
        max_length=128,
        null=True,
        blank=True,
        help_text="Optional password, can be null for Google registration",
    )

    is_social_account = models.BooleanField(
        default=False,
        help_text="True if this account was created via Google sign-in",
    )

    avatar_url = models.URLField(max_length=500, blank=True, default="")

    def __str__(self):
        return self.username or f"User {self.id} ({self.email})"

    def active_roles(self):
        """Names of the roles currently granted to this user."""
        return list(
            self.role_assignments.filter(is_active=True)
            .order_by("role")
            .values_list("role", flat=True)
        )

    def has_role(self, role):
        role = canonical_role(role)
        if not role:
            return False
        return self.role_assignments.filter(role=role, is_active=True).exists()


class RoleAssignment(models.Model):
    """
    A named role granted to a user.

    Revoking a role deactivates the row so the grant history is kept.
    """

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="role_assignments",
    )
    role = models.CharField(max_length=50, db_index=True)
    granted_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="granted_roles",
    )
    granted_at = models.DateTimeField(auto_now_add=True)
    is_active = models.BooleanField(default=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["user", "role"], name="unique_role_per_user"
            ),
        ]
        ordering = ["user_id", "role"]

    def __str__(self):
        state = "active" if self.is_active else "revoked"
        return f"{self.user.email} - {self.role} ({state})"


class UserProfile(models.Model):
    """Self-description shown on the profile page; every field is optional."""

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="profile",
    )
    name = models.CharField(max_length=150, null=True, blank=True)
    age = models.PositiveSmallIntegerField(
        null=True, blank=True, validators=[MaxValueValidator(150)]
    )
    current_work = models.CharField(max_length=200, null=True, blank=True)
    description = models.TextField(null=True, blank=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"Profile of {self.user.email}"
