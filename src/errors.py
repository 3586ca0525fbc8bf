"""
Error types for the Forge Deployment Monitor.
"""

from enum import Enum
from typing import Any, Dict, List, Optional


class ApiErrorKind(Enum):
    """Classification of non-success HTTP status codes."""

    AUTHENTICATION = 401
    AUTHORIZATION = 403
    NOT_FOUND = 404
    INVALID_REQUEST = 422
    RATE_LIMITED = 429
    SERVER_ERROR = 500
    SERVICE_UNAVAILABLE = 503
    UNCLASSIFIED = None

    @classmethod
    def from_status(cls, status_code: int) -> "ApiErrorKind":
        """Map an HTTP status code to its kind, falling back to UNCLASSIFIED."""
        for kind in cls:
            if kind.value == status_code:
                return kind
        return cls.UNCLASSIFIED


ERROR_MESSAGES: Dict[ApiErrorKind, str] = {
    ApiErrorKind.AUTHENTICATION: "Authentication failed. Please check your FORGE_API_TOKEN.",
    ApiErrorKind.AUTHORIZATION: "Access forbidden. You do not have permission to perform this action.",
    ApiErrorKind.NOT_FOUND: "Resource not found. Please check your organization, server, and site IDs.",
    ApiErrorKind.INVALID_REQUEST: "Unprocessable entity. Invalid request data.",
    ApiErrorKind.RATE_LIMITED: "Rate limit exceeded. Please try again later.",
    ApiErrorKind.SERVER_ERROR: "Forge server error. Please try again later.",
    ApiErrorKind.SERVICE_UNAVAILABLE: "Forge is offline for maintenance.",
}


class ForgeError(Exception):
    """Base class for every error raised by this tool."""


class TransportError(ForgeError):
    """The request never produced an HTTP response."""

    def __init__(self, method: str, url: str, cause: Exception):
        self.method = method
        self.url = url
        self.cause = cause
        super().__init__(f"Request failed: {method} {url}: {cause}")


class ResponseParseError(ForgeError):
    """A non-empty response body was not valid JSON."""

    def __init__(self, status_code: int, cause: Exception):
        self.status_code = status_code
        super().__init__(
            f"Failed to parse JSON response (HTTP {status_code}): {cause}"
        )


class MalformedResponseError(ForgeError):
    """A JSON response was missing a field we depend on."""


class ApiError(ForgeError):
    """The API answered with a status code the caller did not expect."""

    def __init__(
        self, kind: ApiErrorKind, status_code: int, details: Optional[str] = None
    ):
        self.kind = kind
        self.status_code = status_code
        self.details = details or ""

        message = ERROR_MESSAGES.get(
            kind, f"API request failed with status {status_code}"
        )
        if self.details:
            message = f"{message} - {self.details}"
        super().__init__(message)

    @classmethod
    def from_response(cls, status_code: int, data: Any = None) -> "ApiError":
        """
        Build a classified error from a response.

        Args:
            status_code: HTTP status code
            data: Parsed response body, if any

        Returns:
            ApiError instance
        """
        details = ""
        if isinstance(data, dict):
            details = str(data.get("message") or "")
        return cls(ApiErrorKind.from_status(status_code), status_code, details)


class ConfigurationError(ForgeError):
    """Required configuration values are missing or invalid."""

    def __init__(self, missing: List[str], invalid: Optional[List[str]] = None):
        self.missing = list(missing)
        self.invalid = list(invalid or [])

        parts = []
        if self.missing:
            parts.append(
                "Missing required environment variables: " + ", ".join(self.missing)
            )
        if self.invalid:
            parts.append("Invalid values: " + ", ".join(self.invalid))
        super().__init__("; ".join(parts))


class DeploymentFailedError(ForgeError):
    """Forge reported a terminal failure status for the deployment."""

    def __init__(self, status: str, output: Optional[str] = None):
        self.status = status
        self.output = output
        if status == "cancelled":
            super().__init__("Deployment was cancelled")
        else:
            super().__init__(f"Deployment {status}")


class DeploymentTimeoutError(ForgeError):
    """The deployment did not reach a terminal status in time."""

    def __init__(self, timeout: float):
        self.timeout = timeout
        super().__init__(f"Deployment timeout after {timeout:.0f}s")
