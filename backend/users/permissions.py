import logging

from django.conf import settings
from rest_framework import permissions

from .models import canonical_role
from .services import RoleService

logger = logging.getLogger(__name__)


class HasConfiguredRole(permissions.BasePermission):
    """
    Allows access only to users holding the role named by ``required_role``
    on the view, or by the ``APP_ADMIN_ROLE`` setting when the view does not
    set one.
    """

    message = "You do not have the role required for this resource."

    def has_permission(self, request, view):
        role = canonical_role(
            getattr(view, "required_role", None) or settings.APP_ADMIN_ROLE
        )
        user = request.user

        if RoleService.has_role(user, role):
            logger.debug(
                "Role-gated access granted",
                extra={
                    "user_id": user.id,
                    "role": role,
                    "view": view.__class__.__name__,
                    "action": "role_access_granted",
                    "component": "HasConfiguredRole",
                },
            )
            return True

        logger.warning(
            "Role-gated access denied",
            extra={
                "user_id": getattr(user, "id", None),
                "role": role,
                "view": view.__class__.__name__,
                "path": request.path,
                "action": "role_access_denied",
                "component": "HasConfiguredRole",
                "severity": "medium",
            },
        )
        return False
