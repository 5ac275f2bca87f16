"""Pydantic models for the M-Pesa SDK.

Wire names are expressed as aliases so Python attributes stay snake_case.
Response models ignore unknown fields and keep most fields optional: the
provider's acknowledgement bodies vary between API versions.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Annotated, Self

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class AuthenticationResponse(BaseModel):
    """Body returned by the OAuth generate endpoint."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    access_token: str = Field(..., min_length=1)
    # The provider sends this as a numeric string.
    expires_in: Annotated[int, Field(gt=0)]


class AccessToken(BaseModel):
    """Cached bearer token with its literal expiry."""

    model_config = ConfigDict(frozen=True)

    value: str
    expires_at: datetime

    @classmethod
    def from_response(
        cls,
        response: AuthenticationResponse,
        *,
        now: datetime | None = None,
    ) -> Self:
        """Create AccessToken from the authentication response."""
        issued = now or datetime.now(UTC)
        return cls(
            value=response.access_token,
            expires_at=issued + timedelta(seconds=response.expires_in),
        )

    def is_expired(self, *, margin_seconds: float = 0, now: datetime | None = None) -> bool:
        """Check if the token is expired once the safety margin is applied."""
        current = now or datetime.now(UTC)
        return current >= self.expires_at - timedelta(seconds=margin_seconds)

    def __repr__(self) -> str:
        return f"AccessToken(value='***', expires_at={self.expires_at.isoformat()!r})"


class ProviderError(BaseModel):
    """Error body returned with a non-2xx status."""

    model_config = ConfigDict(
        frozen=True, extra="ignore", populate_by_name=True, coerce_numbers_to_str=True
    )

    request_id: str | None = Field(default=None, alias="requestId")
    error_code: str = Field(..., alias="errorCode")
    error_message: str = Field(default="", alias="errorMessage")


class _Response(BaseModel):
    model_config = ConfigDict(
        frozen=True, extra="ignore", populate_by_name=True, coerce_numbers_to_str=True
    )


class TransactionResponse(_Response):
    """Synchronous acknowledgement of an asynchronous transaction.

    The outcome itself is delivered later to the result URL.
    """

    conversation_id: str | None = Field(default=None, alias="ConversationID")
    originator_conversation_id: str | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "OriginatorConversationID", "OriginatorCoversationID"
        ),
    )
    response_code: str | None = Field(default=None, alias="ResponseCode")
    response_description: str = Field(default="", alias="ResponseDescription")


AccountBalanceResponse = TransactionResponse
B2bResponse = TransactionResponse
B2cResponse = TransactionResponse
TransactionReversalResponse = TransactionResponse
TransactionStatusResponse = TransactionResponse
C2bRegisterResponse = TransactionResponse
C2bSimulateResponse = TransactionResponse


class ExpressRequestResponse(_Response):
    merchant_request_id: str | None = Field(default=None, alias="MerchantRequestID")
    checkout_request_id: str | None = Field(default=None, alias="CheckoutRequestID")
    response_code: str | None = Field(default=None, alias="ResponseCode")
    response_description: str = Field(default="", alias="ResponseDescription")
    customer_message: str | None = Field(default=None, alias="CustomerMessage")


class ExpressQueryResponse(_Response):
    merchant_request_id: str | None = Field(default=None, alias="MerchantRequestID")
    checkout_request_id: str | None = Field(default=None, alias="CheckoutRequestID")
    response_code: str | None = Field(default=None, alias="ResponseCode")
    response_description: str = Field(default="", alias="ResponseDescription")
    result_code: str | None = Field(default=None, alias="ResultCode")
    result_desc: str | None = Field(default=None, alias="ResultDesc")


class DynamicQrResponse(_Response):
    qr_code: str = Field(..., alias="QRCode")
    response_code: str | None = Field(default=None, alias="ResponseCode")
    response_description: str = Field(default="", alias="ResponseDescription")


class BillManagerResponse(_Response):
    """Acknowledgement shared by the bill manager endpoints."""

    response_code: str = Field(..., alias="rescode")
    response_message: str = Field(default="", alias="resmsg")
    status_message: str | None = Field(default=None, alias="Status_Message")


class OnboardResponse(BillManagerResponse):
    app_key: str | None = None


class InvoiceItem(BaseModel):
    """Line item attached to a bill manager invoice."""

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    item_name: str = Field(..., min_length=1, serialization_alias="itemName")
    amount: Annotated[float, Field(gt=0)]


class Invoice(BaseModel):
    """A bill manager invoice, as sent singly or in bulk."""

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    amount: Annotated[float, Field(gt=0)]
    account_reference: str = Field(..., serialization_alias="accountReference")
    billed_full_name: str = Field(..., serialization_alias="billedFullName")
    billed_period: str = Field(..., serialization_alias="billedPeriod")
    billed_phone_number: str = Field(..., serialization_alias="billedPhoneNumber")
    due_date: datetime = Field(..., serialization_alias="dueDate")
    external_reference: str = Field(..., serialization_alias="externalReference")
    invoice_items: tuple[InvoiceItem, ...] | None = Field(
        default=None, serialization_alias="invoiceItems"
    )
    invoice_name: str = Field(..., serialization_alias="invoiceName")
