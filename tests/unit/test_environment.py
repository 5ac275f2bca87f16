"""Unit tests for environments and certificate resolution."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import serialization

from mpesa_sdk import Mpesa
from mpesa_sdk.environment import (
    ApiEnvironment,
    Environment,
    load_certificate,
    resolve_environment,
)
from mpesa_sdk.errors import EncryptionError, ErrorCode, ValidationError

if TYPE_CHECKING:
    from conftest import StaticEnvironment


class TestEnvironment:
    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("sandbox", Environment.SANDBOX),
            ("Sandbox", Environment.SANDBOX),
            ("PRODUCTION", Environment.PRODUCTION),
            (" production ", Environment.PRODUCTION),
        ],
    )
    def test_parse_is_case_insensitive(self, name: str, expected: Environment) -> None:
        assert Environment.parse(name) is expected

    def test_parse_rejects_unknown(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            Environment.parse("staging")
        assert exc_info.value.field == "environment"

    def test_base_urls(self) -> None:
        assert Environment.SANDBOX.base_url == "https://sandbox.safaricom.co.ke"
        assert Environment.PRODUCTION.base_url == "https://api.safaricom.co.ke"

    def test_builtins_satisfy_protocol(
        self, monkeypatch: pytest.MonkeyPatch, certificate_pem: str
    ) -> None:
        monkeypatch.setenv("MPESA_SANDBOX_CERTIFICATE", certificate_pem)
        assert isinstance(Environment.SANDBOX, ApiEnvironment)


class TestLoadCertificate:
    def test_inline_pem(
        self, monkeypatch: pytest.MonkeyPatch, certificate_pem: str
    ) -> None:
        monkeypatch.setenv("MPESA_SANDBOX_CERTIFICATE", certificate_pem)

        assert load_certificate(Environment.SANDBOX) == certificate_pem
        assert Environment.SANDBOX.certificate == certificate_pem

    def test_path(
        self,
        monkeypatch: pytest.MonkeyPatch,
        tmp_path: Path,
        certificate_pem: str,
    ) -> None:
        cert_file = tmp_path / "production.cer"
        cert_file.write_text(certificate_pem, encoding="ascii")
        monkeypatch.setenv("MPESA_PRODUCTION_CERTIFICATE", str(cert_file))

        assert load_certificate(Environment.PRODUCTION) == certificate_pem.encode("ascii")

    @pytest.mark.asyncio
    async def test_der_file(
        self,
        monkeypatch: pytest.MonkeyPatch,
        tmp_path: Path,
        certificate_pem: str,
        decrypt: Callable[[str], str],
    ) -> None:
        der = x509.load_pem_x509_certificate(certificate_pem.encode()).public_bytes(
            serialization.Encoding.DER
        )
        cert_file = tmp_path / "sandbox.cer"
        cert_file.write_bytes(der)
        monkeypatch.setenv("MPESA_SANDBOX_CERTIFICATE", str(cert_file))

        assert load_certificate(Environment.SANDBOX) == der
        async with Mpesa("K", "S", Environment.SANDBOX) as client:
            assert decrypt(client.security_credential()) == "Safcom496!"

    def test_unreadable_path(
        self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
    ) -> None:
        monkeypatch.setenv("MPESA_SANDBOX_CERTIFICATE", str(tmp_path / "missing.cer"))

        with pytest.raises(EncryptionError) as exc_info:
            load_certificate(Environment.SANDBOX)
        assert exc_info.value.error_code == ErrorCode.CERTIFICATE_ERROR

    def test_missing(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("MPESA_SANDBOX_CERTIFICATE", raising=False)

        with pytest.raises(EncryptionError, match="MPESA_SANDBOX_CERTIFICATE"):
            load_certificate(Environment.SANDBOX)


class TestResolveEnvironment:
    def test_builtin_passthrough(self) -> None:
        assert resolve_environment(Environment.PRODUCTION) is Environment.PRODUCTION

    def test_name(self) -> None:
        assert resolve_environment("sandbox") is Environment.SANDBOX

    def test_custom(self, environment: StaticEnvironment) -> None:
        assert resolve_environment(environment) is environment

    def test_rejects_other_objects(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            resolve_environment(42)  # type: ignore[arg-type]
        assert exc_info.value.field == "environment"
