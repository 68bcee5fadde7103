"""
Odoo Error Handling

Maps Odoo JSON-RPC errors and transport failures to typed exceptions
that the HTTP layer can turn into clean JSON error bodies.

JSON-RPC error reference (Odoo ``/jsonrpc`` endpoint):
    {"code": 200, "message": "Odoo Server Error",
     "data": {"name": "odoo.exceptions.AccessDenied", "message": "...", "debug": "..."}}

- AccessDenied: bad credentials
- AccessError: permission denied
- MissingError: record not found
- UserError / ValidationError: data validation
"""

import socket
from typing import Any

import httpx


class OdooError(Exception):
    """Base exception for all Odoo-related errors."""

    error_code: str = "ODOO_ERROR"
    is_retryable: bool = False

    def __init__(self, message: str, **kwargs: Any):
        super().__init__(message)
        self.message = message
        self.details = kwargs

    def to_dict(self) -> dict:
        """Convert error to a JSON-friendly dict."""
        response = {
            "code": self.error_code,
            "message": self.message,
        }
        for key, value in self.details.items():
            response[key] = value
        return response

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.message}"


class OdooConfigurationError(OdooError):
    """Odoo connection settings are missing or incomplete."""

    error_code = "CONFIGURATION_ERROR"
    is_retryable = False


class OdooAuthenticationError(OdooError):
    """Authentication failed - invalid credentials or API key."""

    error_code = "ACCESS_DENIED"
    is_retryable = False


class OdooPermissionError(OdooError):
    """User lacks permission to access the resource."""

    error_code = "PERMISSION_DENIED"
    is_retryable = False


class OdooRecordNotFoundError(OdooError):
    """Requested record does not exist."""

    error_code = "RECORD_NOT_FOUND"
    is_retryable = False


class OdooValidationError(OdooError):
    """Data validation failed (UserError, ValidationError)."""

    error_code = "VALIDATION_ERROR"
    is_retryable = False


class OdooConnectionError(OdooError):
    """Network or connection error communicating with Odoo."""

    error_code = "CONNECTION_ERROR"
    is_retryable = True


class OdooTimeoutError(OdooConnectionError):
    """Request timed out."""

    error_code = "CONNECTION_TIMEOUT"
    is_retryable = True


class OdooServerError(OdooError):
    """Internal server error from Odoo, or a response we cannot interpret."""

    error_code = "SERVER_ERROR"
    is_retryable = True


def map_jsonrpc_error(error: dict) -> OdooError:
    """
    Map a JSON-RPC ``error`` member to the appropriate OdooError subclass.

    The exception class is read from ``error["data"]["name"]``
    (e.g. ``odoo.exceptions.AccessDenied``).

    Args:
        error: The ``error`` object of a JSON-RPC response

    Returns:
        Appropriate OdooError subclass
    """
    data = error.get("data") or {}
    if not isinstance(data, dict):
        data = {}

    exception_name = str(data.get("name") or "")
    message = data.get("message") or error.get("message") or "Unknown Odoo error"
    details = {"rpc_code": error.get("code")}
    if exception_name:
        details["exception"] = exception_name

    if exception_name.endswith("AccessDenied"):
        return OdooAuthenticationError(message, **details)

    if exception_name.endswith("AccessError"):
        return OdooPermissionError(message, **details)

    if exception_name.endswith("MissingError"):
        return OdooRecordNotFoundError(message, **details)

    if exception_name.endswith(("UserError", "ValidationError")):
        return OdooValidationError(message, **details)

    return OdooServerError(message, **details)


def map_connection_error(error: Exception) -> OdooError:
    """
    Map connection/network errors to appropriate OdooError.

    Args:
        error: Original exception (httpx transport error, socket.timeout, ...)

    Returns:
        Appropriate OdooError subclass
    """
    if isinstance(error, (httpx.TimeoutException, socket.timeout, TimeoutError)):
        return OdooTimeoutError(
            f"Connection timed out: {error}",
            original_error=str(error),
        )

    if isinstance(error, (httpx.ConnectError, ConnectionRefusedError)):
        return OdooConnectionError(
            "Connection refused - Odoo server may be down",
            original_error=str(error),
        )

    if isinstance(error, (httpx.TransportError, ConnectionError, OSError)):
        return OdooConnectionError(
            f"Network error: {error}",
            original_error=str(error),
        )

    return OdooConnectionError(
        f"Connection error: {error}",
        original_error=str(error),
    )
