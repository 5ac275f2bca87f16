"""Deployment targets for the Daraja API.

An environment supplies exactly two things: the API base address and the
X.509 certificate whose public key encrypts the initiator password.
Sandbox and production are built in; any object satisfying
:class:`ApiEnvironment` can be passed to the client instead, e.g. to point
it at a local mock server.

The provider publishes its certificates on the developer portal. Built-in
environments read theirs from ``MPESA_SANDBOX_CERTIFICATE`` /
``MPESA_PRODUCTION_CERTIFICATE`` (PEM text or a file path), falling back to
a ``certificates/<name>.cer`` file shipped inside the package.
"""

from __future__ import annotations

import os
from enum import StrEnum
from importlib import resources
from pathlib import Path
from typing import Protocol, runtime_checkable

from .errors import EncryptionError, ErrorCode, ValidationError


@runtime_checkable
class ApiEnvironment(Protocol):
    """Capability interface consumed by the client."""

    @property
    def base_url(self) -> str:
        """Base address without trailing slash."""
        ...

    @property
    def certificate(self) -> str | bytes:
        """X.509 certificate, PEM text or DER bytes."""
        ...


class Environment(StrEnum):
    """Built-in deployment targets."""

    SANDBOX = "sandbox"
    PRODUCTION = "production"

    @classmethod
    def parse(cls, value: str) -> Environment:
        """Parse an environment name case-insensitively.

        Raises:
            ValidationError: If the name is neither sandbox nor production.
        """
        try:
            return cls(value.strip().lower())
        except ValueError:
            raise ValidationError(
                f"Could not parse the provided environment name: {value!r}",
                field="environment",
            ) from None

    @property
    def base_url(self) -> str:
        return _BASE_URLS[self]

    @property
    def certificate(self) -> str | bytes:
        return load_certificate(self)


_BASE_URLS: dict[Environment, str] = {
    Environment.SANDBOX: "https://sandbox.safaricom.co.ke",
    Environment.PRODUCTION: "https://api.safaricom.co.ke",
}


def load_certificate(environment: Environment) -> str | bytes:
    """Resolve the certificate for a built-in environment.

    Inline PEM text is returned as is. Files are returned as raw bytes, so
    either PEM or DER encoding works.

    Raises:
        EncryptionError: If no certificate is configured or bundled.
    """
    configured = os.environ.get(f"MPESA_{environment.name}_CERTIFICATE")
    if configured:
        if "-----BEGIN" in configured:
            return configured
        path = Path(configured).expanduser()
        try:
            return path.read_bytes()
        except OSError as e:
            raise EncryptionError(
                f"Could not read {environment.value} certificate from {path}",
                code=ErrorCode.CERTIFICATE_ERROR,
                cause=e,
            ) from e

    bundled = resources.files("mpesa_sdk").joinpath(
        "certificates", f"{environment.value}.cer"
    )
    if bundled.is_file():
        return bundled.read_bytes()

    raise EncryptionError(
        f"No {environment.value} certificate available; set "
        f"MPESA_{environment.name}_CERTIFICATE to the certificate published "
        "by the provider",
        code=ErrorCode.CERTIFICATE_ERROR,
    )


def resolve_environment(environment: ApiEnvironment | str) -> ApiEnvironment:
    """Accept an environment object or a built-in environment name."""
    if isinstance(environment, Environment):
        return environment
    if isinstance(environment, str):
        return Environment.parse(environment)
    if not isinstance(environment, ApiEnvironment):
        raise ValidationError(
            "environment must expose base_url and certificate",
            field="environment",
        )
    return environment
