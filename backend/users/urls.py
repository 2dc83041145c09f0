"""
URL configuration for authentication endpoints, mounted under ``/api/auth/``.
"""

from dj_rest_auth.registration.views import RegisterView
from dj_rest_auth.views import LoginView
from django.urls import path
from rest_framework_simplejwt.views import TokenRefreshView

from .views import CurrentUserView, GoogleLoginView, UserProfileView

app_name = "users"

urlpatterns = [
    # Email/password sign-up and login, both answering with a JWT pair
    path("signup/", RegisterView.as_view(), name="signup"),
    path("login/", LoginView.as_view(), name="login"),
    path("google/", GoogleLoginView.as_view(), name="google_login"),
    path("token/refresh/", TokenRefreshView.as_view(), name="token_refresh"),
    path("me/", CurrentUserView.as_view(), name="me"),
    path("profile/", UserProfileView.as_view(), name="profile"),
]
