"""
Shared test fixtures for M-Pesa SDK tests.

Provides a generated RSA certificate, a custom environment and a stubbed
Daraja API served through httpx.MockTransport.
"""

from __future__ import annotations

import base64
from collections.abc import Callable, Generator
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

import httpx
import pytest
import structlog
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa
from cryptography.x509.oid import NameOID

from mpesa_sdk import Mpesa, telemetry
from mpesa_sdk.config import ClientConfig

AUTH_PATH = "oauth/v1/generate"


@pytest.fixture(autouse=True)
def _reset_telemetry() -> Generator[None, None, None]:
    """Undo process-wide logging and tracing setup made by a test."""
    yield
    telemetry._tracer = None
    telemetry._logger = None
    structlog.reset_defaults()


@dataclass(frozen=True)
class StaticEnvironment:
    """Caller-supplied environment, as a user would write one."""

    base_url: str
    certificate: str


class DarajaStub:
    """Records requests and answers them with canned responses."""

    def __init__(self, token: str = "T1", expires_in: int | str = 3600) -> None:
        self.token = token
        self.expires_in = expires_in
        self.requests: list[httpx.Request] = []
        self._routes: dict[str, dict[str, Any]] = {}
        self._failures: dict[str, Exception] = {}
        self.auth_override: dict[str, Any] | None = None

    def respond(self, path: str, status_code: int = 200, **kwargs: Any) -> None:
        """Answer ``path`` with a fresh response built from ``kwargs``."""
        self._routes[path] = {"status_code": status_code, **kwargs}

    def fail(self, path: str, exc: Exception) -> None:
        """Raise ``exc`` from the transport for ``path``."""
        self._failures[path] = exc

    def reset(self, path: str) -> None:
        self._failures.pop(path, None)

    @property
    def auth_requests(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path.lstrip("/") == AUTH_PATH]

    @property
    def api_requests(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path.lstrip("/") != AUTH_PATH]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path.lstrip("/")
        if path in self._failures:
            raise self._failures[path]
        if path == AUTH_PATH:
            if self.auth_override is not None:
                route = dict(self.auth_override)
                return httpx.Response(route.pop("status_code"), **route)
            return httpx.Response(
                200,
                json={"access_token": self.token, "expires_in": str(self.expires_in)},
            )
        route = self._routes.get(path)
        if route is None:
            return httpx.Response(
                404,
                json={
                    "requestId": "stub-404",
                    "errorCode": "404.001.01",
                    "errorMessage": "Resource not found",
                },
            )
        route = dict(route)
        return httpx.Response(route.pop("status_code"), **route)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture(scope="session")
def rsa_private_key() -> rsa.RSAPrivateKey:
    """Provide an RSA key standing in for the provider's key pair."""
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def certificate_pem(rsa_private_key: rsa.RSAPrivateKey) -> str:
    """Provide a self-signed certificate for the test key."""
    name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, "apicrypt.test")])
    now = datetime.now(UTC)
    cert = (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(rsa_private_key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now - timedelta(days=1))
        .not_valid_after(now + timedelta(days=365))
        .sign(rsa_private_key, hashes.SHA256())
    )
    return cert.public_bytes(serialization.Encoding.PEM).decode("ascii")


@pytest.fixture
def environment(certificate_pem: str) -> StaticEnvironment:
    """Provide a custom environment pointing at the stub."""
    return StaticEnvironment(base_url="https://daraja.test", certificate=certificate_pem)


@pytest.fixture
def daraja() -> DarajaStub:
    """Provide a stubbed Daraja API."""
    return DarajaStub()


@pytest.fixture
def config() -> ClientConfig:
    """Provide a basic SDK configuration for testing."""
    return ClientConfig(timeout=5.0, connect_timeout=2.0)


@pytest.fixture
def client(
    daraja: DarajaStub,
    environment: StaticEnvironment,
    config: ClientConfig,
) -> Mpesa:
    """Provide a client wired to the stub transport."""
    return Mpesa(
        "K",
        "S",
        environment,
        config=config,
        http_client=httpx.AsyncClient(transport=daraja.transport()),
    )


@pytest.fixture
def decrypt(rsa_private_key: rsa.RSAPrivateKey) -> Callable[[str], str]:
    """Provide a function recovering the password from a security credential."""

    def _decrypt(credential: str) -> str:
        plaintext = rsa_private_key.decrypt(
            base64.b64decode(credential), padding.PKCS1v15()
        )
        return plaintext.decode("utf-8")

    return _decrypt
