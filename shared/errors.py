"""
Shared error handling for the Database Server Web gateway.
"""

from typing import Dict, Any, Optional
from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standard error response format."""

    error: str
    message: str
    reason: Optional[str] = None


class GatewayException(Exception):
    """Base exception for gateway errors."""

    status_code = 500

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Convert to error response."""
        return ErrorResponse(error=self.code, message=self.message)


class AuthenticationError(GatewayException):
    """Missing, malformed or rejected bearer credential."""

    status_code = 401

    def __init__(self, message: str = "Valid token required", details: Optional[Dict[str, Any]] = None):
        super().__init__("Unauthorized", message, details)


class AuthorityUnreachableError(GatewayException):
    """The trust authority could not be reached to validate a credential."""

    status_code = 502

    def __init__(self, authority_url: str, cause: str = "", details: Optional[Dict[str, Any]] = None):
        self.authority_url = authority_url
        self.cause = cause
        message = f"Cannot reach auth service at {authority_url}"
        if cause:
            message = f"{message}: {cause}"
        super().__init__("Auth service unreachable", message, details)

    def to_response(self) -> ErrorResponse:
        return ErrorResponse(error=self.code, message=self.message, reason="unreachable")


class ConfigurationMissingError(GatewayException):
    """A required setting (e.g. an admin credential) is not configured."""

    def __init__(self, setting: str, details: Optional[Dict[str, Any]] = None):
        self.setting = setting
        super().__init__("CONFIGURATION_MISSING", f"{setting} not configured", details)


class BackendUnreachableError(GatewayException):
    """A backing store refused or timed out the connection."""

    status_code = 503

    def __init__(self, store: str, message: str = "Backend unreachable", details: Optional[Dict[str, Any]] = None):
        self.store = store
        super().__init__("BACKEND_UNREACHABLE", f"{store}: {message}", details)
