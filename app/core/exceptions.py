"""
Custom exceptions for the application.
"""
from typing import Any, Dict, Optional


class RelayException(Exception):
    """Base exception for all relay exceptions."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(RelayException):
    """Missing or malformed request fields."""

    def __init__(self, message: str = "Missing parameters.", field: Optional[str] = None):
        details = {"field": field} if field else {}
        super().__init__(message, status_code=400, details=details)


class ServiceNotConfiguredError(RelayException):
    """A credential the endpoint needs is not configured."""

    def __init__(self, service: str, message: Optional[str] = None):
        super().__init__(
            message or f"{service} not configured.",
            status_code=503,
            details={"service": service},
        )


class UpstreamGenerationError(RelayException):
    """The AI provider failed or returned no usable content."""

    def __init__(self, message: str):
        super().__init__(message, status_code=500)


class MalformedUpstreamResponseError(RelayException):
    """The AI provider returned structured output that could not be parsed."""

    def __init__(self, message: str = "AI service returned malformed output."):
        super().__init__(message, status_code=502)


class StateMismatchError(RelayException):
    """OAuth state is unknown, already consumed, or bound to another provider."""

    def __init__(self, message: str = "Invalid state", provider: Optional[str] = None):
        details = {"provider": provider} if provider else {}
        super().__init__(message, status_code=400, details=details)
