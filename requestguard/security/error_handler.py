"""
Safe Error Handler

Maps exceptions from request handling to generic JSON responses:
- ValueError (including IPParseError) -> 400
- PermissionError -> 403
- anything else -> 500

Error details are logged with the resolved client IP, never returned to the client
unless debug mode is enabled.
"""
import logging
from typing import Any, Dict, Optional

from fastapi import Request
from fastapi.responses import JSONResponse

from .client_ip import get_client_ip

logger = logging.getLogger(__name__)


class SafeErrorHandler:
    """
    Build error responses that don't disclose internal details
    """

    GENERIC_MESSAGES = {
        400: "Bad request",
        403: "Forbidden",
        500: "Internal server error",
    }

    def __init__(self, debug_mode: bool = False):
        """
        Initialize error handler

        Args:
            debug_mode: If True, include the exception message (dev only)
        """
        self.debug_mode = debug_mode

    @staticmethod
    def status_code_for(error: Exception) -> int:
        if isinstance(error, ValueError):
            return 400
        if isinstance(error, PermissionError):
            return 403
        return 500

    async def handle_error(
        self,
        error: Exception,
        request: Optional[Request] = None,
        status_code: Optional[int] = None
    ) -> JSONResponse:
        """
        Handle error and return sanitized response

        Args:
            error: The exception that occurred
            request: The request that caused the error
            status_code: HTTP status code (derived from the exception type if None)
        """
        if status_code is None:
            status_code = self.status_code_for(error)

        self._log_error(error, status_code, request)

        return JSONResponse(
            status_code=status_code,
            content=self._create_safe_response(error, status_code)
        )

    def _create_safe_response(self, error: Exception, status_code: int) -> Dict[str, Any]:
        response = {
            "error": True,
            "status_code": status_code,
            "message": self.GENERIC_MESSAGES.get(status_code, "An error occurred"),
        }

        if self.debug_mode:
            response["debug_message"] = str(error)

        return response

    def _log_error(
        self,
        error: Exception,
        status_code: int,
        request: Optional[Request] = None
    ) -> None:
        log_data = {
            "status_code": status_code,
            "error_type": type(error).__name__,
            "error_message": str(error),
        }

        if request is not None:
            log_data.update({
                "method": request.method,
                "path": request.url.path,
                "client_ip": get_client_ip(request),
            })

        if status_code >= 500:
            logger.error(f"Server error: {log_data}", exc_info=error)
        else:
            logger.warning(f"Client error: {log_data}")


def register_error_handlers(app, debug_mode: bool = False) -> SafeErrorHandler:
    """
    Register SafeErrorHandler for ValueError, PermissionError and Exception

    Args:
        app: FastAPI application instance
        debug_mode: Include exception messages in responses

    Returns:
        The registered handler
    """
    error_handler = SafeErrorHandler(debug_mode=debug_mode)

    async def _handle(request: Request, exc: Exception) -> JSONResponse:
        return await error_handler.handle_error(exc, request)

    for exc_type in (ValueError, PermissionError, Exception):
        app.add_exception_handler(exc_type, _handle)

    return error_handler
