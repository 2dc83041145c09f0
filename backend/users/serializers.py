"""
Serializers for sign-up, email login, user profiles and the admin user listing.
"""

import logging

from dj_rest_auth.registration.serializers import RegisterSerializer as BaseRegisterSerializer
from dj_rest_auth.serializers import LoginSerializer
from django.contrib.auth import authenticate, get_user_model
from rest_framework import serializers
from rest_framework.exceptions import AuthenticationFailed

from .models import UserProfile

logger = logging.getLogger(__name__)
User = get_user_model()


class UserSerializer(serializers.ModelSerializer):
    """Read-only profile of a user including its active roles."""

    roles = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = [
            "id",
            "email",
            "username",
            "first_name",
            "last_name",
            "avatar_url",
            "is_social_account",
            "date_joined",
            "roles",
        ]
        read_only_fields = fields

    def get_roles(self, obj):
        return obj.active_roles()


class UserUpdateSerializer(serializers.ModelSerializer):
    """Display fields a user may change on their own account."""

    class Meta:
        model = User
        fields = ["first_name", "last_name", "avatar_url"]

    def to_representation(self, instance):
        return UserSerializer(instance, context=self.context).data


class UserProfileSerializer(serializers.ModelSerializer):

    class Meta:
        model = UserProfile
        fields = ["name", "age", "current_work", "description", "updated_at"]
        read_only_fields = ["updated_at"]


class RegisterSerializer(BaseRegisterSerializer):
    """
    Email/password sign-up.

    Accounts are identified by email only; allauth generates the internal
    username. The optional ``name`` seeds the user's profile.
    """

    username = None
    name = serializers.CharField(required=False, allow_blank=True, max_length=150)

    def validate_email(self, email):
        email = super().validate_email(email.strip().lower())
        if User.objects.filter(email__iexact=email).exists():
            raise serializers.ValidationError(
                "A user is already registered with this email address."
            )
        return email

    def custom_signup(self, request, user):
        name = self.validated_data.get("name", "").strip()
        if name:
            UserProfile.objects.update_or_create(user=user, defaults={"name": name})

        logger.info(
            "User registered with email and password",
            extra={
                "user_id": user.id,
                "has_name": bool(name),
                "action": "user_registered",
                "component": "RegisterSerializer",
            },
        )


class EmailLoginSerializer(LoginSerializer):
    """
    Email/password login.

    Unknown emails, wrong passwords and inactive accounts all produce the same
    401 so the response does not reveal which accounts exist.
    """

    username = None
    email = serializers.EmailField(required=True)
    password = serializers.CharField(write_only=True, style={"input_type": "password"})

    def validate(self, attrs):
        email = attrs.get("email", "").strip().lower()
        password = attrs.get("password")

        user = authenticate(
            request=self.context.get("request"), email=email, password=password
        )
        if not user:
            logger.warning(
                "Authentication failed - invalid credentials",
                extra={
                    "email": email,
                    "action": "authentication_failure",
                    "component": "EmailLoginSerializer",
                    "reason": "invalid_credentials",
                    "severity": "medium",
                },
            )
            raise AuthenticationFailed("Invalid email or password.")

        logger.info(
            "Authentication successful",
            extra={
                "user_id": user.id,
                "action": "authentication_success",
                "component": "EmailLoginSerializer",
            },
        )
        attrs["user"] = user
        return attrs
