"""
Views for Google sign-in, the current user account, the editable profile and
the role-gated user listing.

Email/password sign-up and login are served by dj-rest-auth's RegisterView and
LoginView, configured through the REST_AUTH serializers.
"""

import logging

from allauth.socialaccount.providers.google.views import GoogleOAuth2Adapter
from allauth.socialaccount.providers.oauth2.client import OAuth2Client
from dj_rest_auth.registration.views import SocialLoginView
from django.conf import settings
from django.contrib.auth import get_user_model
from rest_framework import generics, permissions, status
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response

from finance.mixins import ServiceExceptionHandlerMixin

from .permissions import HasConfiguredRole
from .serializers import UserProfileSerializer, UserSerializer, UserUpdateSerializer
from .services import ProfileService

logger = logging.getLogger(__name__)
User = get_user_model()


class GoogleLoginView(SocialLoginView):
    """
    Exchanges a Google OAuth access token for a JWT pair.

    The token exchange itself is handled by allauth's Google adapter; this view
    adds the user profile to the response.
    """

    adapter_class = GoogleOAuth2Adapter
    client_class = OAuth2Client
    permission_classes = [permissions.AllowAny]
    authentication_classes = []

    @property
    def callback_url(self):
        return settings.GOOGLE_OAUTH_CALLBACK_URL

    def get_response(self):
        response = super().get_response()
        if self.user and isinstance(response.data, dict):
            response.data["user_id"] = self.user.id
            response.data["email"] = self.user.email
            response.data["roles"] = self.user.active_roles()

        logger.info(
            "Google login successful",
            extra={
                "user_id": self.user.id if self.user else None,
                "action": "google_login_success",
                "component": "GoogleLoginView",
            },
        )
        return response

    def post(self, request, *args, **kwargs):
        try:
            return super().post(request, *args, **kwargs)
        except ValidationError:
            raise
        except Exception as e:
            logger.error(
                "Google OAuth2 login failed",
                extra={
                    "error_type": type(e).__name__,
                    "error_message": str(e),
                    "action": "google_login_failed",
                    "component": "GoogleLoginView",
                    "severity": "medium",
                },
                exc_info=True,
            )
            return Response(
                {"detail": "Google authentication failed. Please try again."},
                status=status.HTTP_400_BAD_REQUEST,
            )


class CurrentUserView(generics.RetrieveUpdateAPIView):
    """Account of the authenticated caller; PUT/PATCH change its display fields."""

    permission_classes = [permissions.IsAuthenticated]

    def get_serializer_class(self):
        if self.request.method in ("PUT", "PATCH"):
            return UserUpdateSerializer
        return UserSerializer

    def get_object(self):
        return self.request.user


class UserProfileView(ServiceExceptionHandlerMixin, generics.GenericAPIView):
    """
    Profile of the authenticated caller.

    GET returns empty fields when no profile was saved yet. POST and PUT
    replace the whole profile, PATCH updates only the fields sent.
    """

    serializer_class = UserProfileSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        profile = self.handle_service_call(ProfileService.get_profile, request.user)
        return Response(self.get_serializer(profile).data)

    def put(self, request):
        return self._save(request, partial=False)

    def post(self, request):
        return self._save(request, partial=False)

    def patch(self, request):
        return self._save(request, partial=True)

    def _save(self, request, partial):
        serializer = self.get_serializer(data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        profile = self.handle_service_call(
            ProfileService.save_profile,
            request.user,
            serializer.validated_data,
            partial=partial,
        )
        return Response(self.get_serializer(profile).data)


class AdminUserListView(generics.ListAPIView):
    """All registered users; restricted to holders of the configured admin role."""

    serializer_class = UserSerializer
    permission_classes = [permissions.IsAuthenticated, HasConfiguredRole]

    def get_queryset(self):
        logger.info(
            "Admin user listing requested",
            extra={
                "user_id": self.request.user.id,
                "action": "admin_user_list",
                "component": "AdminUserListView",
            },
        )
        return User.objects.prefetch_related("role_assignments").order_by("id")
