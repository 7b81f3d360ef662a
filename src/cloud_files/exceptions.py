"""Structured exception classes for the Cloud Files SDK."""

import json
from typing import Any, Dict, Optional


class CloudFilesError(Exception):
    """Base exception for all Cloud Files SDK errors.

    This exception serves as the parent class for every error raised by
    the storage and CDN interfaces, providing a consistent interface for
    error handling in calling code.

    :param message: Human-readable error message
    :param code: Optional error code for programmatic handling
    :param details: Optional dictionary containing additional error context
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        """Initialize the exception with message, code, and details."""
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary format.

        :return: Dictionary containing error code, message, and details
        """
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }

    def to_json(self) -> str:
        """Convert exception to JSON string.

        :return: JSON-encoded string representation of the exception
        """
        return json.dumps(self.to_dict())


class AuthenticationError(CloudFilesError):
    """Raised when authentication fails.

    Covers rejected credentials at login, identity responses without a
    token or service URL, and a session whose renewal failed after the
    service answered 401.

    :param message: Description of the authentication failure
    :param details: Optional additional context about the failure
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        """Initialize authentication error with message and optional details."""
        super().__init__(message=message, code="AUTHENTICATION_ERROR", details=details)


class RequestFailed(CloudFilesError):
    """Raised for any non-success response from the service.

    :param message: Description of the failure
    :param status_code: HTTP status code from the response
    :param response_body: Raw response body, kept for diagnostics
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        response_body: Optional[str] = None,
    ):
        """Initialize request error with message and response details."""
        details: Dict[str, Any] = {}
        if status_code:
            details["status_code"] = status_code
        if response_body:
            details["response_body"] = response_body
        super().__init__(message=message, code="REQUEST_FAILED", details=details)
        self.status_code = status_code
        self.response_body = response_body


class NotFound(RequestFailed):
    """Raised when the container or object does not exist (404).

    Kept distinct from :class:`RequestFailed` so callers can treat a
    missing resource as an expected condition.
    """

    def __init__(self, message: str, response_body: Optional[str] = None):
        super().__init__(message=message, status_code=404, response_body=response_body)
        self.code = "NOT_FOUND"


class MalformedResponse(CloudFilesError):
    """Raised when a response body cannot be parsed into the expected shape.

    :param message: Description of the parsing failure
    :param expected: Optional name of the expected shape (e.g. "array")
    :param response_body: Optional raw body that failed to parse
    """

    def __init__(
        self,
        message: str,
        expected: Optional[str] = None,
        response_body: Optional[str] = None,
    ):
        details: Dict[str, Any] = {}
        if expected:
            details["expected"] = expected
        if response_body:
            details["response_body"] = response_body
        super().__init__(message=message, code="MALFORMED_RESPONSE", details=details)
        self.response_body = response_body


class ConfigurationError(CloudFilesError):
    """Raised for configuration-related errors.

    This exception is raised when configuration validation fails
    or when required settings (credentials, auth method) are missing.

    :param message: Description of the configuration error
    :param setting: Optional name of the problematic setting
    """

    def __init__(self, message: str, setting: Optional[str] = None):
        """Initialize configuration error with message and optional setting."""
        details = {}
        if setting:
            details["setting"] = setting
        super().__init__(message=message, code="CONFIGURATION_ERROR", details=details)
