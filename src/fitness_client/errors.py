"""
Fitness client error types.

Every failure the activity API can produce maps onto one of four kinds:
unauthorized, validation, not found, network.
"""

from typing import Any, Optional


class FitnessClientError(Exception):
    def __init__(self, code: str, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.code = code
        self.details = details


class UnauthorizedError(FitnessClientError):
    def __init__(self, message: str = "Not authenticated", details: Optional[dict[str, Any]] = None):
        super().__init__("unauthorized", message, details)


class ValidationError(FitnessClientError):
    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__("validation_error", message, details)


class NotFoundError(FitnessClientError):
    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__("not_found", message, details)


class NetworkError(FitnessClientError):
    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__("network_error", message, details)


class AuthError(FitnessClientError):
    """Identity provider failure: code exchange, state mismatch, refresh."""

    def __init__(self, message: str, code: str = "auth_error"):
        super().__init__(code, message)
