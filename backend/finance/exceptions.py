"""
Domain errors of the ledger and their API representations.

Services raise the plain domain errors; ``ServiceExceptionHandlerMixin`` and
the project exception handler turn them into the DRF exceptions below, whose
payload is ``{"error", "message", "code", "hint"}``.
"""

from django.conf import settings
from rest_framework import status
from rest_framework.exceptions import APIException


class DataIntegrityError(Exception):
    """A stored record violates a ledger invariant (bad amount or type)."""

    error = "data_integrity_error"

    def __init__(self, message, code="invalid_record", hint=None, record_id=None):
        self.message = message
        self.code = code
        self.hint = hint or "Correct or remove the offending record."
        self.record_id = record_id
        super().__init__(message)


class StorageUnavailableError(Exception):
    """The database could not be reached or refused the operation."""

    error = "storage_unavailable"

    def __init__(self, message="Storage is temporarily unavailable.", code="storage_unavailable", hint=None):
        self.message = message
        self.code = code
        self.hint = hint
        super().__init__(message)


def error_payload(error, message, code, hint):
    return {"error": error, "message": message, "code": code, "hint": hint}


class DataIntegrityFailure(APIException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_code = DataIntegrityError.error

    def __init__(self, exc):
        super().__init__(
            detail=error_payload(exc.error, exc.message, exc.code, exc.hint),
            code=self.default_code,
        )


class StorageUnavailable(APIException):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_code = StorageUnavailableError.error

    def __init__(self, exc=None):
        exc = exc or StorageUnavailableError()
        super().__init__(
            detail=error_payload(
                exc.error,
                exc.message,
                exc.code,
                exc.hint or settings.STORAGE_RETRY_HINT,
            ),
            code=self.default_code,
        )
