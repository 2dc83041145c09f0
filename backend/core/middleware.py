import logging
import time

logger = logging.getLogger(__name__)


class RequestLoggingMiddleware:
    """
    Logs one structured line per API request: method, path, status, user and
    duration. Slow requests and server errors are raised to warning/error.
    """

    SLOW_REQUEST_MS = 1000

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        started = time.monotonic()
        response = self.get_response(request)
        duration_ms = round((time.monotonic() - started) * 1000, 2)

        self._log_request(request, response, duration_ms)
        return response

    def _log_request(self, request, response, duration_ms):
        user = getattr(request, "user", None)
        extra_context = {
            "request_path": request.path,
            "request_method": request.method,
            "status_code": response.status_code,
            "user_id": user.id if user is not None and user.is_authenticated else None,
            "duration_ms": duration_ms,
            "action": "request_completed",
            "component": "RequestLoggingMiddleware",
        }

        if response.status_code >= 500:
            logger.error(
                "Request failed with server error",
                extra={**extra_context, "severity": "high"},
            )
        elif duration_ms >= self.SLOW_REQUEST_MS:
            logger.warning(
                "Slow request",
                extra={
                    **extra_context,
                    "severity": "medium",
                    "threshold_ms": self.SLOW_REQUEST_MS,
                },
            )
        else:
            logger.info("Request completed", extra=extra_context)
