"""Custom exceptions for the ShopAssist proxy.

Every failure talking to the remote assistant API is raised as one of these
types. The app-level handler in ``main`` turns them into the generic
``{"error": ...}`` payload, so remote details never reach the caller.
"""

from typing import Any, Dict, Optional


class ShopAssistException(Exception):
    """Base exception for ShopAssist proxy errors."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None,
    ):
        """Initialize exception.

        Args:
            message: Public error message returned to the caller
            status_code: HTTP status code for API responses
            details: Additional error details, logged but never returned
        """
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.details = details or {}


class UpstreamUnavailableError(ShopAssistException):
    """Raised when the remote API cannot be reached (DNS, connect, reset)."""

    def __init__(self, message: str, url: str, error: Exception):
        super().__init__(
            message=message,
            status_code=500,
            details={
                "url": url,
                "error": str(error),
                "error_type": type(error).__name__,
            },
        )


class UpstreamStatusError(ShopAssistException):
    """Raised when the remote API answers with a non-success status or a
    body that is not JSON."""

    def __init__(
        self,
        message: str,
        url: str,
        remote_status: int,
        reason: Optional[str] = None,
    ):
        super().__init__(
            message=message,
            status_code=500,
            details={
                "url": url,
                "remote_status": remote_status,
                "reason": reason,
            },
        )
