"""Unit tests for error classes.

Tests error hierarchy, structured context, and error codes.
"""

import pytest
from hypothesis import given, settings, strategies as st

from mpesa_sdk.errors import (
    ApiError,
    AuthError,
    EncryptionError,
    ErrorCode,
    MpesaError,
    NetworkError,
    RequestTimeoutError,
    SerializationError,
    ValidationError,
)


class TestErrorCode:
    """Tests for ErrorCode enum."""

    def test_error_codes_are_strings(self) -> None:
        """Error codes should be string values."""
        assert ErrorCode.AUTHENTICATION_FAILED == "AUTH_1001"
        assert ErrorCode.VALIDATION_ERROR == "VAL_2001"
        assert ErrorCode.NETWORK_ERROR == "NET_3001"
        assert ErrorCode.SERIALIZATION_ERROR == "SER_4001"
        assert ErrorCode.API_ERROR == "API_5001"
        assert ErrorCode.ENCRYPTION_ERROR == "ENC_6001"

    def test_error_code_categories(self) -> None:
        """Error codes should follow category pattern."""
        assert ErrorCode.MISSING_FIELD.value.startswith("VAL_2")
        assert ErrorCode.INVALID_URL.value.startswith("VAL_2")
        assert ErrorCode.TIMEOUT_ERROR.value.startswith("NET_3")
        assert ErrorCode.CERTIFICATE_ERROR.value.startswith("ENC_6")


class TestMpesaError:
    """Tests for base MpesaError."""

    def test_basic_error(self) -> None:
        error = MpesaError("Test error", ErrorCode.NETWORK_ERROR)

        assert str(error) == "Test error"
        assert error.message == "Test error"
        assert error.error_code == "NET_3001"
        assert error.details == {}

    def test_to_dict(self) -> None:
        """Should serialize for structured logging."""
        error = MpesaError(
            "Failed", ErrorCode.HTTP_STATUS_ERROR, status_code=503, details={"a": 1}
        )

        assert error.to_dict() == {
            "error": "Failed",
            "code": "NET_3004",
            "status_code": 503,
            "details": {"a": 1},
        }

    def test_repr_is_concise(self) -> None:
        error = MpesaError("boom", ErrorCode.API_ERROR)
        assert repr(error) == "MpesaError(code='API_5001', message='boom')"


class TestHierarchy:
    """Every SDK error derives from MpesaError."""

    @pytest.mark.parametrize(
        "error",
        [
            ValidationError("bad", field="party_a"),
            AuthError(),
            EncryptionError("bad cert"),
            NetworkError(),
            RequestTimeoutError(),
            SerializationError("bad body"),
            ApiError("1", "Invalid short code"),
        ],
    )
    def test_is_mpesa_error(self, error: MpesaError) -> None:
        assert isinstance(error, MpesaError)

    def test_timeout_is_network_error(self) -> None:
        error = RequestTimeoutError(timeout_seconds=5.0)

        assert isinstance(error, NetworkError)
        assert error.is_timeout is True
        assert error.error_code == ErrorCode.TIMEOUT_ERROR
        assert error.details["timeout_seconds"] == 5.0

    def test_plain_network_error_is_not_timeout(self) -> None:
        assert NetworkError().is_timeout is False


class TestValidationError:
    def test_names_field(self) -> None:
        error = ValidationError("missing", field="party_a", code=ErrorCode.MISSING_FIELD)

        assert error.field == "party_a"
        assert error.details["field"] == "party_a"
        assert error.error_code == "VAL_2002"

    def test_field_is_optional(self) -> None:
        error = ValidationError("bad")
        assert error.field is None
        assert "field" not in error.details


class TestApiError:
    @given(
        code=st.text(min_size=1, max_size=20),
        message=st.text(max_size=100),
    )
    @settings(max_examples=100)
    def test_preserves_provider_values(self, code: str, message: str) -> None:
        """Provider code and message are kept verbatim."""
        error = ApiError(code, message, status_code=200)

        assert error.code == code
        assert error.message == message
        assert error.error_code == ErrorCode.API_ERROR
        assert error.details["provider_code"] == code

    def test_request_id(self) -> None:
        error = ApiError("400.002.02", "Bad Request", request_id="abc-1")

        assert error.request_id == "abc-1"
        assert error.details["request_id"] == "abc-1"
        assert repr(error) == "ApiError(code='400.002.02', message='Bad Request')"


class TestAuthError:
    def test_default_message(self) -> None:
        error = AuthError(status_code=400)

        assert "client key" in error.message
        assert error.status_code == 400
        assert error.error_code == ErrorCode.AUTHENTICATION_FAILED

    def test_provider_context(self) -> None:
        error = AuthError("Invalid credentials", provider_code="400.008.01", request_id="r1")

        assert error.provider_code == "400.008.01"
        assert error.details == {"provider_code": "400.008.01", "request_id": "r1"}


class TestSerializationError:
    def test_truncates_body(self) -> None:
        error = SerializationError("bad", body="x" * 2000)
        assert len(error.details["body"]) == 512

    def test_keeps_cause(self) -> None:
        cause = ValueError("Expecting value")
        error = SerializationError("bad", cause=cause)

        assert error.__cause__ is cause
        assert error.details["cause"] == "Expecting value"
