"""Async M-Pesa client.

The client owns everything stateful for one set of credentials: the token
cache, the initiator password and the HTTP transport. Operations are
created through builder factory methods and sent through :meth:`Mpesa.send`.
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING, Any, Self

from .config import ClientConfig
from .core.dispatch import Dispatcher
from .credentials import Credentials
from .environment import Environment, resolve_environment
from .errors import MpesaError, ValidationError
from .http import create_async_http_client
from .services import (
    AccountBalanceBuilder,
    B2bBuilder,
    B2cBuilder,
    BulkInvoiceBuilder,
    C2bRegisterBuilder,
    C2bSimulateBuilder,
    CancelBulkInvoicesBuilder,
    CancelInvoiceBuilder,
    DynamicQrBuilder,
    ExpressQueryBuilder,
    ExpressRequestBuilder,
    OnboardBuilder,
    OnboardModifyBuilder,
    ReconciliationBuilder,
    SingleInvoiceBuilder,
    TransactionReversalBuilder,
    TransactionStatusBuilder,
)
from .telemetry import configure_telemetry, get_logger

if TYPE_CHECKING:
    import httpx
    from pydantic import BaseModel, SecretStr

    from .core.builder import RequestSpec
    from .core.token_cache import TokenCache
    from .environment import ApiEnvironment


class Mpesa:
    """Asynchronous Daraja API client."""

    def __init__(
        self,
        client_key: str,
        client_secret: str | SecretStr,
        environment: ApiEnvironment | str,
        *,
        config: ClientConfig | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize async client.

        Args:
            client_key: Consumer key of the Daraja app.
            client_secret: Consumer secret of the Daraja app.
            environment: ``Environment`` member, its name, or any object
                exposing ``base_url`` and ``certificate``.
            config: SDK configuration. A ``telemetry`` section set on it is
                applied process-wide through :func:`configure_telemetry`;
                left unset, the active structlog setup is kept.
            http_client: Transport to use instead of a client-owned one.
                It is not closed by :meth:`close`.
        """
        self.config = config or ClientConfig()
        if "telemetry" in self.config.model_fields_set:
            configure_telemetry(self.config.telemetry)
        self.environment = resolve_environment(environment)
        self._credentials = Credentials(client_key, client_secret)
        self._owns_http = http_client is None
        self._http = http_client or create_async_http_client(self.config)
        self._dispatcher = Dispatcher(
            self._http, self.environment, self._credentials, self.config
        )

    @classmethod
    def from_env(cls, prefix: str = "MPESA_", **kwargs: Any) -> Self:
        """Create a client from environment variables.

        Reads ``CLIENT_KEY``, ``CLIENT_SECRET``, ``ENVIRONMENT`` (default
        sandbox), ``INITIATOR_PASSWORD`` and the settings read by
        :meth:`ClientConfig.from_env`.

        Raises:
            ValidationError: If the key or secret is not set.
        """
        key = os.environ.get(f"{prefix}CLIENT_KEY")
        secret = os.environ.get(f"{prefix}CLIENT_SECRET")
        if not key:
            raise ValidationError(f"{prefix}CLIENT_KEY is not set", field="client_key")
        if not secret:
            raise ValidationError(
                f"{prefix}CLIENT_SECRET is not set", field="client_secret"
            )

        kwargs.setdefault("config", ClientConfig.from_env(prefix))
        client = cls(
            key,
            secret,
            os.environ.get(f"{prefix}ENVIRONMENT", Environment.SANDBOX.value),
            **kwargs,
        )
        password = os.environ.get(f"{prefix}INITIATOR_PASSWORD")
        if password:
            client.set_initiator_password(password)
        return client

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_http:
            await self._http.aclose()

    @property
    def client_key(self) -> str:
        return self._credentials.client_key

    @property
    def tokens(self) -> TokenCache:
        """Bearer token cache of this client."""
        return self._dispatcher.tokens

    def set_initiator_password(self, password: str) -> None:
        """Replace the initiator password used for security credentials.

        Takes effect on the next privileged operation.
        """
        self._credentials.set_initiator_password(password)

    def security_credential(self) -> str:
        """Encrypt the current initiator password for the environment.

        Raises:
            EncryptionError: If the certificate is missing or unusable.
        """
        return self._dispatcher.security_credential()

    async def auth(self) -> str:
        """Return a valid bearer token, authenticating if needed."""
        token = await self._dispatcher.tokens.get_token()
        return token.value

    async def is_connected(self) -> bool:
        """Check whether the credentials are accepted by the environment."""
        try:
            await self.auth()
        except MpesaError as e:
            get_logger().warning("connection_check_failed", error_code=e.error_code)
            return False
        return True

    async def send(self, spec: RequestSpec) -> BaseModel:
        """Dispatch a built request spec.

        Raises:
            AuthError, EncryptionError, NetworkError, ApiError,
            SerializationError: See :meth:`Dispatcher.dispatch`.
        """
        return await self._dispatcher.dispatch(spec)

    # Builders

    def account_balance(self, initiator_name: str) -> AccountBalanceBuilder:
        return AccountBalanceBuilder(initiator_name, client=self)

    def b2b(self, initiator_name: str) -> B2bBuilder:
        return B2bBuilder(initiator_name, client=self)

    def b2c(self, initiator_name: str) -> B2cBuilder:
        return B2cBuilder(initiator_name, client=self)

    def transaction_reversal(self, initiator_name: str) -> TransactionReversalBuilder:
        return TransactionReversalBuilder(initiator_name, client=self)

    def transaction_status(self, initiator_name: str) -> TransactionStatusBuilder:
        return TransactionStatusBuilder(initiator_name, client=self)

    def c2b_register(self) -> C2bRegisterBuilder:
        return C2bRegisterBuilder(client=self)

    def c2b_simulate(self) -> C2bSimulateBuilder:
        return C2bSimulateBuilder(client=self)

    def express_request(
        self, business_short_code: str, *, pass_key: str | None = None
    ) -> ExpressRequestBuilder:
        return ExpressRequestBuilder(business_short_code, pass_key=pass_key, client=self)

    def express_query(
        self, business_short_code: str, *, pass_key: str | None = None
    ) -> ExpressQueryBuilder:
        return ExpressQueryBuilder(business_short_code, pass_key=pass_key, client=self)

    def dynamic_qr(self) -> DynamicQrBuilder:
        return DynamicQrBuilder(client=self)

    def onboard(self) -> OnboardBuilder:
        return OnboardBuilder(client=self)

    def onboard_modify(self) -> OnboardModifyBuilder:
        return OnboardModifyBuilder(client=self)

    def single_invoice(self) -> SingleInvoiceBuilder:
        return SingleInvoiceBuilder(client=self)

    def bulk_invoice(self) -> BulkInvoiceBuilder:
        return BulkInvoiceBuilder(client=self)

    def cancel_invoice(self) -> CancelInvoiceBuilder:
        return CancelInvoiceBuilder(client=self)

    def cancel_bulk_invoices(self) -> CancelBulkInvoicesBuilder:
        return CancelBulkInvoicesBuilder(client=self)

    def reconciliation(self) -> ReconciliationBuilder:
        return ReconciliationBuilder(client=self)

    def __repr__(self) -> str:
        return f"Mpesa(client_key={self.client_key!r}, environment={self.environment!r})"
