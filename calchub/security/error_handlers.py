"""
Error handlers for the calculator API.

Client errors keep a short, generic message per status code. Unhandled
exceptions are logged in full and answered with an opaque 500 so internal
details never reach the response body.
"""

import logging
import re
import traceback
from fastapi import Request, HTTPException
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError

from calchub.core.config import settings

logger = logging.getLogger(__name__)


class SecureErrorHandler:
    """Turns exceptions into JSON error responses without leaking internals"""

    def __init__(self, debug_mode: bool = False):
        self.debug_mode = debug_mode

        self.safe_error_messages = {
            400: "Bad request - please check your input",
            401: "Authentication required",
            403: "Access denied",
            404: "Resource not found",
            405: "Method not allowed",
            409: "Conflict - resource already exists",
            413: "Request payload too large",
            422: "Invalid request data",
            429: "Too many requests - please try again later",
            500: "Internal server error",
            503: "Service unavailable",
        }

        self.sensitive_patterns = [
            'database', 'sql', 'sqlite', 'connection',
            'secret', 'key', 'token', 'password',
            'traceback', 'exception', 'sqlalchemy', 'pydantic',
        ]

    async def handle_http_exception(self, request: Request, exc: HTTPException) -> JSONResponse:
        status_code = exc.status_code
        client_ip = self._get_client_ip(request)
        logger.warning(
            f"HTTP {status_code} error: {request.method} {request.url.path} "
            f"from {client_ip} - {exc.detail}"
        )

        response_data = {
            "detail": self.safe_error_messages.get(
                status_code, "An error occurred while processing your request"
            ),
            "status_code": status_code,
        }
        if self.debug_mode and exc.detail:
            response_data["debug_info"] = self._filter_sensitive_info(str(exc.detail))

        return JSONResponse(
            status_code=status_code,
            content=response_data,
            headers=getattr(exc, "headers", None),
        )

    async def handle_validation_error(self, request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = exc.errors()
        logger.warning(
            f"Validation error: {request.method} {request.url.path} "
            f"from {self._get_client_ip(request)} - {len(errors)} errors"
        )

        safe_errors = [
            {
                "field": ".".join(str(loc) for loc in error.get("loc", [])),
                "message": self._get_safe_validation_message(error.get("type", ""), error.get("msg", "")),
            }
            for error in errors[:10]
        ]
        return JSONResponse(
            status_code=422,
            content={"detail": "Invalid request data", "errors": safe_errors},
        )

    async def handle_internal_error(self, request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            f"Internal server error: {request.method} {request.url.path} "
            f"from {self._get_client_ip(request)} - {type(exc).__name__}: {exc}"
        )
        if self.debug_mode:
            logger.error(f"Traceback: {''.join(traceback.format_exception(exc))}")

        response_data = {
            "detail": "Internal server error",
            "type": "internal_error",
        }
        if self.debug_mode:
            response_data["error_type"] = type(exc).__name__
        return JSONResponse(status_code=500, content=response_data)

    def _filter_sensitive_info(self, message: str) -> str:
        lowered = message.lower()
        if any(pattern in lowered for pattern in self.sensitive_patterns):
            return "Error details filtered for security"
        message = re.sub(r'/[a-zA-Z0-9_/.-]+\.py', '[file path]', message)
        return re.sub(r'line \d+', '[line number]', message)

    def _get_safe_validation_message(self, error_type: str, original_message: str) -> str:
        safe_messages = {
            "missing": "This field is required",
            "string_too_short": "Invalid length",
            "string_too_long": "Invalid length",
            "enum": "Invalid option selected",
            "json": "Invalid JSON format",
            "type": "Invalid data type",
            "parsing": "Invalid data type",
            "value_error": "Invalid value",
        }
        for error_key, safe_msg in safe_messages.items():
            if error_key in error_type:
                return safe_msg
        return self._filter_sensitive_info(original_message)

    def _get_client_ip(self, request: Request) -> str:
        forwarded_for = request.headers.get("x-forwarded-for")
        if forwarded_for:
            return forwarded_for.split(',')[0].strip()

        real_ip = request.headers.get("x-real-ip")
        if real_ip:
            return real_ip

        if request.client:
            return request.client.host

        return "unknown"


error_handler = SecureErrorHandler(debug_mode=settings.DEBUG)
