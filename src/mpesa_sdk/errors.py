"""Error classes for the M-Pesa SDK.

Implements a single structured error hierarchy with error codes and
machine-readable context so callers can branch without parsing messages.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Standardized error codes for the M-Pesa SDK."""

    # Authentication errors (1xxx)
    AUTHENTICATION_FAILED = "AUTH_1001"
    UNAUTHORIZED = "AUTH_1002"

    # Validation errors (2xxx)
    VALIDATION_ERROR = "VAL_2001"
    MISSING_FIELD = "VAL_2002"
    INVALID_URL = "VAL_2003"
    INVALID_CONFIG = "VAL_2004"

    # Network errors (3xxx)
    NETWORK_ERROR = "NET_3001"
    TIMEOUT_ERROR = "NET_3002"
    CONNECTION_ERROR = "NET_3003"
    HTTP_STATUS_ERROR = "NET_3004"

    # Serialization errors (4xxx)
    SERIALIZATION_ERROR = "SER_4001"

    # Provider errors (5xxx)
    API_ERROR = "API_5001"

    # Encryption errors (6xxx)
    ENCRYPTION_ERROR = "ENC_6001"
    CERTIFICATE_ERROR = "ENC_6002"


class MpesaError(Exception):
    """Base error for the M-Pesa SDK with structured error information."""

    def __init__(
        self,
        message: str,
        code: ErrorCode | str,
        *,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_code = code if isinstance(code, str) else code.value
        self.status_code = status_code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        return {
            "error": self.message,
            "code": self.error_code,
            "status_code": self.status_code,
            "details": self.details,
        }

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.error_code!r}, message={self.message!r})"


class ValidationError(MpesaError):
    """A request field is missing or invalid. Raised before any network call."""

    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
        code: ErrorCode = ErrorCode.VALIDATION_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        merged = dict(details or {})
        if field is not None:
            merged["field"] = field
        super().__init__(message, code, details=merged)
        self.field = field


class AuthError(MpesaError):
    """Client credentials were rejected by the authentication endpoint."""

    def __init__(
        self,
        message: str = "Could not authenticate, check the client key and secret",
        *,
        status_code: int | None = None,
        provider_code: str | None = None,
        request_id: str | None = None,
    ) -> None:
        details: dict[str, Any] = {}
        if provider_code:
            details["provider_code"] = provider_code
        if request_id:
            details["request_id"] = request_id
        super().__init__(
            message,
            ErrorCode.AUTHENTICATION_FAILED,
            status_code=status_code,
            details=details,
        )
        self.provider_code = provider_code
        self.request_id = request_id


class EncryptionError(MpesaError):
    """The security credential could not be produced."""

    def __init__(
        self,
        message: str,
        *,
        code: ErrorCode = ErrorCode.ENCRYPTION_ERROR,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            message,
            code,
            details={"cause": str(cause)} if cause else None,
        )
        self.__cause__ = cause


class NetworkError(MpesaError):
    """Network request failed."""

    is_timeout = False

    def __init__(
        self,
        message: str = "Network request failed",
        *,
        code: ErrorCode = ErrorCode.NETWORK_ERROR,
        status_code: int | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            message,
            code,
            status_code=status_code,
            details={"cause": str(cause)} if cause else None,
        )
        self.cause = cause
        self.__cause__ = cause


class RequestTimeoutError(NetworkError):
    """Request exceeded the configured timeout."""

    is_timeout = True

    def __init__(
        self,
        message: str = "Request timed out",
        *,
        timeout_seconds: float | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message, code=ErrorCode.TIMEOUT_ERROR, cause=cause)
        self.timeout_seconds = timeout_seconds
        if timeout_seconds is not None:
            self.details["timeout_seconds"] = timeout_seconds


class SerializationError(MpesaError):
    """A request or response body could not be encoded or decoded."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        body: str | None = None,
        cause: Exception | None = None,
    ) -> None:
        details: dict[str, Any] = {}
        if body is not None:
            details["body"] = body[:512]
        if cause is not None:
            details["cause"] = str(cause)
        super().__init__(
            message,
            ErrorCode.SERIALIZATION_ERROR,
            status_code=status_code,
            details=details,
        )
        self.__cause__ = cause


class ApiError(MpesaError):
    """Business-level rejection from the provider.

    ``code`` and ``message`` are the provider's values, unmodified.
    """

    def __init__(
        self,
        code: str,
        message: str,
        *,
        status_code: int | None = None,
        request_id: str | None = None,
        body: dict[str, Any] | None = None,
    ) -> None:
        details: dict[str, Any] = {"provider_code": code}
        if request_id:
            details["request_id"] = request_id
        super().__init__(
            message,
            ErrorCode.API_ERROR,
            status_code=status_code,
            details=details,
        )
        self.code = code
        self.request_id = request_id
        self.body = body or {}

    def __repr__(self) -> str:
        return f"ApiError(code={self.code!r}, message={self.message!r})"
