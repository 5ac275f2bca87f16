"""Authenticated request dispatch.

Every operation goes through the same pipeline: obtain a bearer token,
attach a fresh security credential for privileged operations, serialize,
send, then map the response onto a typed model or an SDK error. Nothing is
retried; a failed financial operation must be reconciled by the caller.
"""

from __future__ import annotations

import json
from datetime import UTC, datetime
from typing import TYPE_CHECKING

import httpx
import pydantic

from ..errors import MpesaError, SerializationError
from ..models import AccessToken, AuthenticationResponse
from ..telemetry import get_logger, trace_operation
from .errors import ErrorFactory
from .security import encrypt_password
from .token_cache import TokenCache

if TYPE_CHECKING:
    from collections.abc import Callable

    from pydantic import BaseModel

    from ..config import ClientConfig
    from ..credentials import Credentials
    from ..environment import ApiEnvironment
    from .builder import RequestSpec

AUTH_PATH = "oauth/v1/generate"


class Dispatcher:
    """Sends request specs on behalf of one client instance.

    Owns the client's token cache; the credentials and environment are
    read on every call so password changes apply to the next request.
    """

    def __init__(
        self,
        http: httpx.AsyncClient,
        environment: ApiEnvironment,
        credentials: Credentials,
        config: ClientConfig,
        *,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._http = http
        self._environment = environment
        self._credentials = credentials
        self._config = config
        self._clock = clock or (lambda: datetime.now(UTC))
        self.tokens = TokenCache(
            self.authenticate,
            margin_seconds=config.cache.token_expiry_margin,
            clock=self._clock,
        )

    def url_for(self, path: str) -> str:
        return f"{self._environment.base_url.rstrip('/')}/{path.lstrip('/')}"

    async def authenticate(self) -> AccessToken:
        """Run one client-credentials exchange against the token endpoint.

        Callers should go through :attr:`tokens` instead, which coalesces
        concurrent exchanges.

        Raises:
            AuthError: If the endpoint rejected the key/secret pair.
            NetworkError: On transport failure or an unexpected status.
            SerializationError: If the token body is malformed.
        """
        url = self.url_for(AUTH_PATH)
        with trace_operation("mpesa.authenticate", attributes={"http.url": url}):
            try:
                response = await self._http.get(
                    url,
                    params={"grant_type": "client_credentials"},
                    auth=self._credentials.basic_auth(),
                )
            except httpx.HTTPError as e:
                raise ErrorFactory.from_exception(e, timeout=self._config.timeout) from e

            if not response.is_success:
                raise ErrorFactory.from_http_response(response, auth=True)

            body = ErrorFactory.decode_json(response)
            try:
                parsed = AuthenticationResponse.model_validate(body)
            except pydantic.ValidationError as e:
                raise ErrorFactory.invalid_body(response, e) from e

            return AccessToken.from_response(parsed, now=self._clock())

    def security_credential(self) -> str:
        """Encrypt the current initiator password under the environment certificate."""
        return encrypt_password(
            self._credentials.initiator_password.get_secret_value(),
            self._environment.certificate,
        )

    async def dispatch(self, spec: RequestSpec) -> BaseModel:
        """Send a validated spec and decode the provider's response.

        Raises:
            AuthError: If authentication failed or the token was refused.
            EncryptionError: If the security credential could not be produced.
            NetworkError: On transport failure or an undecodable error status.
            ApiError: If the provider rejected the request.
            SerializationError: If a success body does not match the model.
        """
        operation = type(spec).__name__
        url = self.url_for(spec.path)
        with trace_operation(
            "mpesa.dispatch",
            attributes={
                "mpesa.operation": operation,
                "mpesa.privileged": spec.privileged,
                "http.method": spec.method,
                "http.url": url,
            },
        ):
            token = await self.tokens.get_token()
            body = self._encode(spec)
            get_logger().debug("dispatch_started", operation=operation, path=spec.path)

            try:
                response = await self._http.request(
                    spec.method,
                    url,
                    content=body,
                    headers={
                        "Authorization": f"Bearer {token.value}",
                        "Content-Type": "application/json",
                    },
                )
            except httpx.HTTPError as e:
                error = ErrorFactory.from_exception(e, timeout=self._config.timeout)
                get_logger().warning(
                    "dispatch_transport_failed",
                    operation=operation,
                    error_code=error.error_code,
                )
                raise error from e

            try:
                result = self._decode(spec, response)
            except MpesaError as e:
                get_logger().warning(
                    "dispatch_rejected",
                    operation=operation,
                    status_code=response.status_code,
                    error_code=e.error_code,
                )
                raise

            get_logger().info(
                "dispatch_completed",
                operation=operation,
                status_code=response.status_code,
            )
            return result

    def _encode(self, spec: RequestSpec) -> bytes:
        """Serialize the spec to the JSON request body.

        Non-finite floats are refused rather than written as bare
        ``Infinity`` or ``NaN`` tokens.
        """
        try:
            payload = spec.to_payload()
        except (TypeError, ValueError) as e:
            raise SerializationError(
                f"Could not serialize {type(spec).__name__}", cause=e
            ) from e
        if spec.privileged and isinstance(payload, dict):
            payload["SecurityCredential"] = self.security_credential()
        try:
            return json.dumps(payload, allow_nan=False).encode("utf-8")
        except (TypeError, ValueError) as e:
            raise SerializationError(
                f"Could not encode {type(spec).__name__} as JSON", cause=e
            ) from e

    def _decode(self, spec: RequestSpec, response: httpx.Response) -> BaseModel:
        if response.status_code == 401:
            self.tokens.invalidate()
        if not response.is_success:
            raise ErrorFactory.from_http_response(response)

        body = ErrorFactory.decode_json(response)
        rejection = ErrorFactory.business_error(body, status_code=response.status_code)
        if rejection is not None:
            raise rejection

        try:
            return spec.response_model.model_validate(body)
        except pydantic.ValidationError as e:
            raise ErrorFactory.invalid_body(response, e) from e
