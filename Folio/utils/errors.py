"""Error taxonomy for the portfolio persistence layer."""

from __future__ import annotations

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """Classification of every failure the persistence layer can report."""
    NOT_CONFIGURED = "not_configured"
    REMOTE_UNAVAILABLE = "remote_unavailable"
    REMOTE_REJECTED = "remote_rejected"
    LOCAL_CORRUPT = "local_corrupt"
    LOCAL_UNAVAILABLE = "local_unavailable"
    INVALID_UPLOAD = "invalid_upload"


class FolioException(Exception):
    """Base exception for the Folio system."""

    kind: Optional[ErrorKind] = None

    def __init__(self, message: str, context: Optional[dict] = None):
        """Initialize exception with context.

        Args:
            message: Error message
            context: Dictionary with additional context (operation, status, etc.)
        """
        self.message = message
        self.context = context or {}
        super().__init__(message)

    @property
    def status_code(self) -> Optional[int]:
        return self.context.get("status_code")

    def __str__(self) -> str:
        """String representation with context."""
        result = f"[{self.__class__.__name__}] {self.message}"
        if self.context:
            result += f" (context: {self.context})"
        return result


class ConfigurationError(FolioException):
    """Raised when configuration is invalid."""
    pass


class NotConfiguredError(FolioException):
    """Raised when a remote endpoint or credential is missing."""
    kind = ErrorKind.NOT_CONFIGURED


class RemoteUnavailableError(FolioException):
    """Raised on network failures, timeouts and provider-side 5xx."""
    kind = ErrorKind.REMOTE_UNAVAILABLE


class RemoteRejectedError(FolioException):
    """Raised when the provider refuses a request (auth, not found, validation)."""
    kind = ErrorKind.REMOTE_REJECTED


class LocalCorruptError(FolioException):
    """Raised when a cached value cannot be parsed."""
    kind = ErrorKind.LOCAL_CORRUPT


class LocalUnavailableError(FolioException):
    """Raised when no local storage backend is available."""
    kind = ErrorKind.LOCAL_UNAVAILABLE


class InvalidUploadError(FolioException):
    """Raised when an upload payload fails the size or extension checks."""
    kind = ErrorKind.INVALID_UPLOAD


__all__ = [
    "ErrorKind",
    "FolioException",
    "ConfigurationError",
    "NotConfiguredError",
    "RemoteUnavailableError",
    "RemoteRejectedError",
    "LocalCorruptError",
    "LocalUnavailableError",
    "InvalidUploadError",
]
