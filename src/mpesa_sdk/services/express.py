"""M-Pesa Express (Lipa Na M-Pesa Online, STK push).

Both the push request and its status query authenticate with a password
derived from the business short code, the passkey and a timestamp::

    base64(short_code + pass_key + YYYYMMDDHHMMSS)

The timestamp is East Africa Time and is taken when the body is
serialized, so a spec can be built well before it is sent.
"""

from __future__ import annotations

import base64
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING, Any, ClassVar, Self

from pydantic import BaseModel, Field, field_validator

from ..constants import DEFAULT_PASSKEY, DEFAULT_REMARKS, CommandId
from ..core.builder import RequestBuilder, RequestSpec, coerce_enum
from ..models import ExpressQueryResponse, ExpressRequestResponse

if TYPE_CHECKING:
    from ..client import Mpesa

EAT = timezone(timedelta(hours=3), "EAT")

# Kenyan MSISDN in international format.
MSISDN_PATTERN = r"^254\d{9}$"

EXPRESS_TRANSACTION_TYPES = frozenset(
    {CommandId.CUSTOMER_PAY_BILL_ONLINE, CommandId.CUSTOMER_BUY_GOODS_ONLINE}
)


def express_timestamp(now: datetime | None = None) -> str:
    """Format the current time as the provider expects, in EAT."""
    current = now.astimezone(EAT) if now else datetime.now(EAT)
    return current.strftime("%Y%m%d%H%M%S")


def express_password(short_code: str, pass_key: str, timestamp: str) -> str:
    return base64.b64encode(f"{short_code}{pass_key}{timestamp}".encode()).decode("ascii")


class _ExpressSpec(RequestSpec):
    business_short_code: str = Field(
        ..., min_length=1, serialization_alias="BusinessShortCode"
    )
    pass_key: str = Field(..., min_length=1, exclude=True, repr=False)

    def to_payload(self, *, now: datetime | None = None) -> dict[str, Any]:
        timestamp = express_timestamp(now)
        payload = self.model_dump(by_alias=True, exclude_none=True, mode="json")
        payload["Password"] = express_password(
            self.business_short_code, self.pass_key, timestamp
        )
        payload["Timestamp"] = timestamp
        return payload


class ExpressRequest(_ExpressSpec):
    path: ClassVar[str] = "mpesa/stkpush/v1/processrequest"
    response_model: ClassVar[type[BaseModel]] = ExpressRequestResponse

    transaction_type: CommandId = Field(..., serialization_alias="TransactionType")
    amount: float = Field(..., gt=0, serialization_alias="Amount")
    party_a: str = Field(..., pattern=MSISDN_PATTERN, serialization_alias="PartyA")
    party_b: str = Field(..., min_length=1, serialization_alias="PartyB")
    phone_number: str = Field(
        ..., pattern=MSISDN_PATTERN, serialization_alias="PhoneNumber"
    )
    callback_url: str = Field(..., serialization_alias="CallBackURL")
    account_ref: str = Field(..., min_length=1, serialization_alias="AccountReference")
    transaction_desc: str = Field(..., serialization_alias="TransactionDesc")

    @field_validator("transaction_type")
    @classmethod
    def validate_transaction_type(cls, v: CommandId) -> CommandId:
        if v not in EXPRESS_TRANSACTION_TYPES:
            msg = (
                "transaction_type must be CustomerPayBillOnline or "
                f"CustomerBuyGoodsOnline, got {v.value}"
            )
            raise ValueError(msg)
        return v


class ExpressRequestBuilder(RequestBuilder[ExpressRequest]):
    """Prompts a customer's phone to authorize a payment to ``party_b``."""

    spec_type = ExpressRequest
    required = (
        "amount",
        "party_a",
        "party_b",
        "phone_number",
        "callback_url",
        "account_ref",
    )

    def __init__(
        self,
        business_short_code: str,
        *,
        pass_key: str | None = None,
        client: Mpesa | None = None,
    ) -> None:
        super().__init__(client=client)
        self._set("business_short_code", business_short_code)
        self._set("pass_key", pass_key or DEFAULT_PASSKEY)
        self._set("transaction_type", CommandId.CUSTOMER_PAY_BILL_ONLINE)
        self._set("transaction_desc", DEFAULT_REMARKS)

    def pass_key(self, pass_key: str) -> Self:
        return self._set("pass_key", pass_key)

    def transaction_type(self, transaction_type: CommandId | str) -> Self:
        return self._set(
            "transaction_type",
            coerce_enum(CommandId, transaction_type, "transaction_type"),
        )

    def amount(self, amount: float) -> Self:
        return self._set("amount", amount)

    def party_a(self, party_a: str) -> Self:
        """Phone number sending the money, formatted 2547XXXXXXXX."""
        return self._set("party_a", party_a)

    def party_b(self, party_b: str) -> Self:
        """Organization receiving the funds."""
        return self._set("party_b", party_b)

    def phone_number(self, phone_number: str) -> Self:
        """Phone number receiving the prompt, formatted 2547XXXXXXXX."""
        return self._set("phone_number", phone_number)

    def callback_url(self, url: str) -> Self:
        return self._set_url("callback_url", url, validate=False)

    def try_callback_url(self, url: str) -> Self:
        return self._set_url("callback_url", url, validate=True)

    def account_ref(self, account_ref: str) -> Self:
        return self._set("account_ref", account_ref)

    def transaction_desc(self, description: str) -> Self:
        return self._set("transaction_desc", description)


class ExpressQueryRequest(_ExpressSpec):
    path: ClassVar[str] = "mpesa/stkpushquery/v1/query"
    response_model: ClassVar[type[BaseModel]] = ExpressQueryResponse

    checkout_request_id: str = Field(
        ..., min_length=1, serialization_alias="CheckoutRequestID"
    )


class ExpressQueryBuilder(RequestBuilder[ExpressQueryRequest]):
    """Checks the status of an earlier push request."""

    spec_type = ExpressQueryRequest
    required = ("checkout_request_id",)

    def __init__(
        self,
        business_short_code: str,
        *,
        pass_key: str | None = None,
        client: Mpesa | None = None,
    ) -> None:
        super().__init__(client=client)
        self._set("business_short_code", business_short_code)
        self._set("pass_key", pass_key or DEFAULT_PASSKEY)

    def pass_key(self, pass_key: str) -> Self:
        return self._set("pass_key", pass_key)

    def checkout_request_id(self, checkout_request_id: str) -> Self:
        """Identifier returned by the push request."""
        return self._set("checkout_request_id", checkout_request_id)
