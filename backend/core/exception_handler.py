"""
Project-wide DRF exception handler.

Database connectivity errors that escape a view outside of a service call are
reported with the same 503 payload the repositories produce.
"""

import logging

from django.db import InterfaceError, OperationalError
from rest_framework.views import exception_handler

from finance.exceptions import StorageUnavailable

logger = logging.getLogger(__name__)


def api_exception_handler(exc, context):
    if isinstance(exc, (OperationalError, InterfaceError)):
        view = context.get("view")
        logger.error(
            "Database unavailable while handling request",
            extra={
                "view": view.__class__.__name__ if view else None,
                "error_type": type(exc).__name__,
                "error_message": str(exc),
                "action": "storage_unavailable",
                "component": "api_exception_handler",
                "severity": "high",
            },
        )
        exc = StorageUnavailable()

    return exception_handler(exc, context)
