"""
Service exception handler mixin.

Provides unified exception handling for service layer calls made from views,
with structured logging and translation of domain errors into DRF exceptions.
"""

import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework.exceptions import APIException
from rest_framework.exceptions import PermissionDenied as DRFPermissionDenied
from rest_framework.exceptions import ValidationError as DRFValidationError

from ..exceptions import (
    DataIntegrityError,
    DataIntegrityFailure,
    StorageUnavailable,
    StorageUnavailableError,
)

logger = logging.getLogger(__name__)


class ServiceExceptionHandlerMixin:
    """
    Mixin for handling service layer exceptions in views.

    Translation rules:
    - Django ValidationError -> 400 with field-keyed messages
    - DataIntegrityError -> 500 ``data_integrity_error`` payload
    - StorageUnavailableError -> 503 ``storage_unavailable`` payload
    - PermissionError -> 403
    - anything unexpected -> generic 500 ``service_error``

    Usage:
        result = self.handle_service_call(
            self.ledger_service.get_balance, request.user
        )
    """

    def handle_service_call(self, service_call, *args, **kwargs):
        """
        Execute service call with exception translation and logging.

        Args:
            service_call: Service method to execute
            *args: Positional arguments for service call
            **kwargs: Keyword arguments for service call

        Returns:
            Any: Result from service call
        """
        service_name = getattr(service_call, "__self__", self).__class__.__name__
        method_name = getattr(service_call, "__name__", str(service_call))
        request = getattr(self, "request", None)
        user_id = getattr(getattr(request, "user", None), "id", None) if request else None

        context = {
            "service_name": service_name,
            "method_name": method_name,
            "user_id": user_id,
            "component": "ServiceExceptionHandlerMixin",
        }

        logger.debug(
            "Service call execution initiated",
            extra={
                **context,
                "args_count": len(args),
                "kwargs_keys": list(kwargs.keys()),
                "action": "service_call_start",
            },
        )

        try:
            result = service_call(*args, **kwargs)

        except DRFValidationError as e:
            logger.warning(
                "Service validation error (DRF)",
                extra={
                    **context,
                    "error_type": "DRFValidationError",
                    "error_detail": e.detail,
                    "action": "service_validation_error_drf",
                    "severity": "medium",
                },
            )
            raise

        except DjangoValidationError as e:
            detail = e.message_dict if hasattr(e, "error_dict") else e.messages

            logger.warning(
                "Service validation error (Django)",
                extra={
                    **context,
                    "error_type": "DjangoValidationError",
                    "error_messages": detail,
                    "action": "service_validation_error_django",
                    "severity": "medium",
                },
            )
            raise DRFValidationError(detail)

        except DataIntegrityError as e:
            logger.error(
                "Ledger data integrity violation",
                extra={
                    **context,
                    "error_type": "DataIntegrityError",
                    "error_code": e.code,
                    "error_message": e.message,
                    "record_id": e.record_id,
                    "action": "service_data_integrity_error",
                    "severity": "high",
                },
            )
            raise DataIntegrityFailure(e)

        except StorageUnavailableError as e:
            logger.error(
                "Service storage unavailable",
                extra={
                    **context,
                    "error_type": "StorageUnavailableError",
                    "error_message": e.message,
                    "action": "service_storage_unavailable",
                    "severity": "high",
                },
            )
            raise StorageUnavailable(e)

        except PermissionError as e:
            logger.warning(
                "Service permission denied (Python)",
                extra={
                    **context,
                    "error_type": "PermissionError",
                    "error_message": str(e),
                    "action": "service_permission_denied_python",
                    "severity": "high",
                },
            )
            raise DRFPermissionDenied(str(e))

        except APIException as e:
            logger.error(
                "Service API exception",
                extra={
                    **context,
                    "error_type": type(e).__name__,
                    "error_detail": e.detail,
                    "status_code": e.status_code,
                    "action": "service_api_exception",
                    "severity": "high",
                },
            )
            raise

        except Exception as e:
            logger.error(
                "Service operation failed unexpectedly",
                extra={
                    **context,
                    "error_type": type(e).__name__,
                    "error_message": str(e),
                    "action": "service_unexpected_error",
                    "severity": "critical",
                },
                exc_info=True,
            )
            # Generic message to prevent information leakage
            raise APIException(detail="Service operation failed", code="service_error")

        logger.debug(
            "Service call completed successfully",
            extra={
                **context,
                "result_type": type(result).__name__,
                "action": "service_call_success",
            },
        )
        return result
