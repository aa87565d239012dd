"""Custom exceptions for Playback Bridge with proper HTTP status codes."""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Error codes for structured error responses."""

    # Generic errors
    BRIDGE_ERROR = "BRIDGE_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # Credential errors
    CREDENTIAL_MISSING = "CREDENTIAL_MISSING"
    UPSTREAM_AUTH_ERROR = "UPSTREAM_AUTH_ERROR"
    OAUTH_CALLBACK_ERROR = "OAUTH_CALLBACK_ERROR"

    # Upstream API errors
    UPSTREAM_REQUEST_ERROR = "UPSTREAM_REQUEST_ERROR"

    # Playback errors
    NO_DEVICE = "NO_DEVICE"
    NOTHING_FOUND = "NOTHING_FOUND"


class BridgeException(Exception):
    """Base exception for bridge errors with HTTP status code support.

    All custom exceptions inherit from this class so the error handler can
    turn them into consistent JSON responses.
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.BRIDGE_ERROR,
        status_code: int = 500,
        details: dict[str, Any] | None = None,
    ):
        """Initialize bridge exception.

        Args:
            message: Human-readable error message
            code: Error code from ErrorCode enum
            status_code: HTTP status code (default 500)
            details: Additional error context/details
        """
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)


class CredentialMissingException(BridgeException):
    """No refresh credential is held; the user must go through /login."""

    def __init__(
        self,
        message: str = "No refresh token available. Visit /login to authorize.",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, code=ErrorCode.CREDENTIAL_MISSING, status_code=500, details=details)


class UpstreamAuthException(BridgeException):
    """The token endpoint rejected a refresh or code exchange."""

    def __init__(self, message: str = "Spotify token exchange failed", details: dict[str, Any] | None = None):
        super().__init__(message, code=ErrorCode.UPSTREAM_AUTH_ERROR, status_code=500, details=details)


class UpstreamRequestException(BridgeException):
    """Spotify API request failed.

    ``upstream_status`` is the provider's HTTP status, or None when the
    request never got a response.
    """

    def __init__(
        self,
        message: str,
        upstream_status: int | None = None,
        reason: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.upstream_status = upstream_status
        self.reason = reason
        details = dict(details or {})
        if upstream_status is not None:
            details.setdefault("upstream_status", upstream_status)
        if reason:
            details.setdefault("reason", reason)
        super().__init__(message, code=ErrorCode.UPSTREAM_REQUEST_ERROR, status_code=500, details=details)


class NoDeviceException(BridgeException):
    """No playback device is available."""

    def __init__(
        self,
        message: str = "No Spotify device available. Open Spotify on a phone, computer or speaker and try again.",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, code=ErrorCode.NO_DEVICE, status_code=500, details=details)


class NothingFoundException(BridgeException):
    """A query resolved to nothing playable."""

    def __init__(self, query: str, details: dict[str, Any] | None = None):
        self.query = query
        super().__init__(
            "Nothing found",
            code=ErrorCode.NOTHING_FOUND,
            status_code=404,
            details={"query": query, **(details or {})},
        )


class VolumeValidationException(BridgeException):
    """Volume level missing or outside 0-100."""

    def __init__(self, level: object = None):
        super().__init__(
            "Volume must be 0-100",
            code=ErrorCode.VALIDATION_ERROR,
            status_code=400,
            details={"level": level},
        )


class OAuthCallbackException(BridgeException):
    """The OAuth callback carried an error, an unknown state or no code."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message, code=ErrorCode.OAUTH_CALLBACK_ERROR, status_code=400, details=details)
