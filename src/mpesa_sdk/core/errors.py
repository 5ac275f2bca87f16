"""Centralized error factory for the M-Pesa SDK.

Maps httpx exceptions and provider responses onto the SDK error taxonomy so
the token cache and the dispatch pipeline report failures the same way.
"""

from __future__ import annotations

from typing import Any

import httpx
import pydantic

from ..constants import MpesaResponseCode
from ..errors import (
    ApiError,
    AuthError,
    ErrorCode,
    MpesaError,
    NetworkError,
    RequestTimeoutError,
    SerializationError,
)
from ..models import ProviderError

_AUTH_REJECTION_STATUSES = frozenset({400, 401, 403})


class ErrorFactory:
    """Centralized error creation with consistent structure."""

    @staticmethod
    def from_exception(
        exc: Exception,
        *,
        timeout: float | None = None,
    ) -> MpesaError:
        """Create SDK error from a transport exception.

        Args:
            exc: Original exception.
            timeout: Configured timeout, reported on timeout errors.

        Returns:
            NetworkError, or RequestTimeoutError when the deadline passed.
        """
        if isinstance(exc, MpesaError):
            return exc

        if isinstance(exc, httpx.TimeoutException):
            return RequestTimeoutError(
                f"Request timed out: {exc}",
                timeout_seconds=timeout,
                cause=exc,
            )

        if isinstance(exc, httpx.ConnectError):
            return NetworkError(
                f"Connection failed: {exc}",
                code=ErrorCode.CONNECTION_ERROR,
                cause=exc,
            )

        if isinstance(exc, httpx.HTTPError):
            return NetworkError(f"HTTP error: {exc}", cause=exc)

        return NetworkError(f"Unexpected error: {exc}", cause=exc)

    @staticmethod
    def from_http_response(
        response: httpx.Response,
        *,
        auth: bool = False,
    ) -> MpesaError:
        """Create SDK error from a non-2xx response.

        Args:
            response: HTTP response object.
            auth: Whether the response came from the token endpoint.

        Returns:
            AuthError for rejected credentials, ApiError when the provider
            explained the failure, NetworkError otherwise.
        """
        status = response.status_code
        body = _try_json(response)
        provider = _provider_error(body)

        if status == 401 or (auth and status in _AUTH_REJECTION_STATUSES):
            if provider is None:
                return AuthError(status_code=status)
            return AuthError(
                provider.error_message or AuthError().message,
                status_code=status,
                provider_code=provider.error_code,
                request_id=provider.request_id,
            )

        if provider is not None:
            return ApiError(
                provider.error_code,
                provider.error_message,
                status_code=status,
                request_id=provider.request_id,
                body=body,
            )

        if isinstance(body, dict):
            business = ErrorFactory.business_error(body, status_code=status)
            if business is not None:
                return business

        return NetworkError(
            f"Request failed with status {status}",
            code=ErrorCode.HTTP_STATUS_ERROR,
            status_code=status,
        )

    @staticmethod
    def decode_json(response: httpx.Response) -> dict[str, Any]:
        """Decode a response body that must be a JSON object.

        Raises:
            SerializationError: If the body is not valid JSON or not an object.
        """
        try:
            body = response.json()
        except ValueError as e:
            raise SerializationError(
                "Response body is not valid JSON",
                status_code=response.status_code,
                body=response.text,
                cause=e,
            ) from e
        if not isinstance(body, dict):
            raise SerializationError(
                f"Expected a JSON object, got {type(body).__name__}",
                status_code=response.status_code,
                body=response.text,
            )
        return body

    @staticmethod
    def business_error(
        body: dict[str, Any],
        *,
        status_code: int | None = None,
    ) -> ApiError | None:
        """Detect a provider rejection carried in a decoded body.

        A ``ResponseCode`` other than ``"0"``, a bill manager ``rescode``
        outside 2xx, or an ``errorCode`` key are all rejections.
        """
        provider = _provider_error(body)
        if provider is not None:
            return ApiError(
                provider.error_code,
                provider.error_message,
                status_code=status_code,
                request_id=provider.request_id,
                body=body,
            )

        code = body.get("ResponseCode")
        if code is not None and str(code) != MpesaResponseCode.SUCCESS:
            return ApiError(
                str(code),
                str(body.get("ResponseDescription", "")),
                status_code=status_code,
                body=body,
            )

        rescode = body.get("rescode")
        if rescode is not None and not _is_2xx(rescode):
            return ApiError(
                str(rescode),
                str(body.get("resmsg", "")),
                status_code=status_code,
                body=body,
            )

        return None

    @staticmethod
    def invalid_body(
        response: httpx.Response,
        exc: pydantic.ValidationError,
    ) -> SerializationError:
        """Wrap a response model validation failure."""
        return SerializationError(
            f"Response body does not match the expected shape: {exc.error_count()} error(s)",
            status_code=response.status_code,
            body=response.text,
            cause=exc,
        )


def _try_json(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return None


def _provider_error(body: Any) -> ProviderError | None:
    if not isinstance(body, dict) or "errorCode" not in body:
        return None
    try:
        return ProviderError.model_validate(body)
    except pydantic.ValidationError:
        return None


def _is_2xx(code: Any) -> bool:
    try:
        return 200 <= int(code) < 300
    except (TypeError, ValueError):
        return False
