"""Client credentials and the mutable initiator password."""

from __future__ import annotations

import httpx
from pydantic import SecretStr

from .constants import DEFAULT_INITIATOR_PASSWORD
from .errors import ValidationError


class Credentials:
    """Holds the client key/secret pair and the initiator password.

    The key and secret are fixed at construction. The initiator password can
    be replaced at any time; the next security credential computed after the
    change uses the new value.
    """

    def __init__(
        self,
        client_key: str,
        client_secret: str | SecretStr,
        *,
        initiator_password: str | None = None,
    ) -> None:
        if not client_key:
            raise ValidationError("client_key must not be empty", field="client_key")
        secret = (
            client_secret
            if isinstance(client_secret, SecretStr)
            else SecretStr(client_secret)
        )
        if not secret.get_secret_value():
            raise ValidationError(
                "client_secret must not be empty", field="client_secret"
            )
        self._client_key = client_key
        self._client_secret = secret
        self._initiator_password = SecretStr(
            initiator_password or DEFAULT_INITIATOR_PASSWORD
        )

    @property
    def client_key(self) -> str:
        return self._client_key

    @property
    def client_secret(self) -> SecretStr:
        return self._client_secret

    @property
    def initiator_password(self) -> SecretStr:
        return self._initiator_password

    def set_initiator_password(self, password: str) -> None:
        """Replace the initiator password. Last writer wins."""
        if not password:
            raise ValidationError(
                "initiator_password must not be empty", field="initiator_password"
            )
        self._initiator_password = SecretStr(password)

    def basic_auth(self) -> httpx.BasicAuth:
        """HTTP Basic credentials for the token endpoint."""
        return httpx.BasicAuth(self._client_key, self._client_secret.get_secret_value())

    def __repr__(self) -> str:
        return f"Credentials(client_key={self._client_key!r}, client_secret=SecretStr('**********'))"
