"""Error envelopes for the Folio API.

Every failure leaves the API as ``{"success": false, "error": CODE,
"message": ..., "details": ..., "request_id": ...}``.
"""

import logging
from typing import Any, Dict, Optional, Tuple

from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from ..utils.errors import ErrorKind, FolioException

logger = logging.getLogger("FOLIO.Errors")

# Status codes for domain exceptions that escape a route.
KIND_STATUS = {
    ErrorKind.NOT_CONFIGURED: 503,
    ErrorKind.REMOTE_UNAVAILABLE: 503,
    ErrorKind.REMOTE_REJECTED: 502,
    ErrorKind.INVALID_UPLOAD: 400,
}


class APIError(Exception):
    """An error the API reports to the client as-is."""

    status_code = 400
    error_code = "API_ERROR"

    def __init__(self, message: str, details: Any = None, status_code: Optional[int] = None, error_code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details
        if status_code is not None:
            self.status_code = status_code
        if error_code is not None:
            self.error_code = error_code


class ValidationError(APIError):
    """Malformed request body or form."""
    error_code = "VALIDATION_ERROR"


class AuthenticationError(APIError):
    """Missing, expired or wrong credentials."""
    status_code = 401
    error_code = "UNAUTHORIZED"


class ForbiddenError(APIError):
    status_code = 403
    error_code = "FORBIDDEN"


class UploadFailedError(APIError):
    """Image upload failed; the editor must not keep a stale URL."""
    status_code = 502
    error_code = "UPLOAD_FAILED"


class DeliveryFailedError(APIError):
    """Contact email could not be sent."""
    status_code = 500
    error_code = "DELIVERY_FAILED"


def _envelope(code: str, message: str, details: Any = None) -> Dict[str, Any]:
    body: Dict[str, Any] = {"success": False, "error": code, "message": message}
    if details is not None:
        body["details"] = details
    body["request_id"] = getattr(request, "request_id", None)
    return body


def format_error_response(error: Exception) -> Tuple[Dict[str, Any], int]:
    """Map any exception to an envelope and status code."""
    if isinstance(error, APIError):
        return _envelope(error.error_code, error.message, error.details), error.status_code

    if isinstance(error, HTTPException):
        code = (error.name or "HTTP error").upper().replace(" ", "_")
        return _envelope(code, error.description or str(error)), error.code or 400

    if isinstance(error, FolioException) and error.kind in KIND_STATUS:
        logger.warning(f"Request failed: {error}")
        return _envelope(error.kind.value.upper(), error.message), KIND_STATUS[error.kind]

    logger.error(f"Unhandled exception: {type(error).__name__}: {error}", exc_info=error)
    return _envelope("INTERNAL_SERVER_ERROR", "An unexpected error occurred. Please try again later."), 500


def setup_error_handlers(app: Flask) -> None:
    """Send every exception through ``format_error_response``."""

    @app.errorhandler(Exception)
    def handle_error(error):
        body, status = format_error_response(error)
        return jsonify(body), status
