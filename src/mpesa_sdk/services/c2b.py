"""Customer to business: callback URL registration and sandbox simulation."""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar, Self

from pydantic import BaseModel, Field

from ..constants import CommandId, ResponseType
from ..core.builder import RequestBuilder, RequestSpec, coerce_enum
from ..models import C2bRegisterResponse, C2bSimulateResponse

if TYPE_CHECKING:
    from ..client import Mpesa


class C2bRegisterRequest(RequestSpec):
    path: ClassVar[str] = "mpesa/c2b/v1/registerurl"
    response_model: ClassVar[type[BaseModel]] = C2bRegisterResponse

    validation_url: str = Field(..., serialization_alias="ValidationURL")
    confirmation_url: str = Field(..., serialization_alias="ConfirmationURL")
    response_type: ResponseType = Field(..., serialization_alias="ResponseType")
    short_code: str = Field(..., min_length=1, serialization_alias="ShortCode")


class C2bRegisterBuilder(RequestBuilder[C2bRegisterRequest]):
    """Registers the confirmation and validation URLs of a short code."""

    spec_type = C2bRegisterRequest
    required = ("short_code", "confirmation_url", "validation_url")

    def __init__(self, *, client: Mpesa | None = None) -> None:
        super().__init__(client=client)
        self._set("response_type", ResponseType.COMPLETED)

    def short_code(self, short_code: str) -> Self:
        return self._set("short_code", short_code)

    def response_type(self, response_type: ResponseType | str) -> Self:
        """What M-Pesa does when the validation URL cannot be reached."""
        return self._set(
            "response_type",
            coerce_enum(ResponseType, response_type, "response_type"),
        )

    def confirmation_url(self, url: str) -> Self:
        return self._set_url("confirmation_url", url, validate=False)

    def try_confirmation_url(self, url: str) -> Self:
        return self._set_url("confirmation_url", url, validate=True)

    def validation_url(self, url: str) -> Self:
        return self._set_url("validation_url", url, validate=False)

    def try_validation_url(self, url: str) -> Self:
        return self._set_url("validation_url", url, validate=True)


class C2bSimulateRequest(RequestSpec):
    path: ClassVar[str] = "mpesa/c2b/v1/simulate"
    response_model: ClassVar[type[BaseModel]] = C2bSimulateResponse

    command_id: CommandId = Field(..., serialization_alias="CommandID")
    amount: float = Field(..., gt=0, serialization_alias="Amount")
    msisdn: str | None = Field(default=None, serialization_alias="Msisdn")
    bill_ref_number: str | None = Field(default=None, serialization_alias="BillRefNumber")
    short_code: str = Field(..., min_length=1, serialization_alias="ShortCode")


class C2bSimulateBuilder(RequestBuilder[C2bSimulateRequest]):
    """Simulates a customer payment. Only available in the sandbox."""

    spec_type = C2bSimulateRequest
    required = ("short_code", "amount")

    def __init__(self, *, client: Mpesa | None = None) -> None:
        super().__init__(client=client)
        self._set("command_id", CommandId.CUSTOMER_PAY_BILL_ONLINE)

    def command_id(self, command_id: CommandId | str) -> Self:
        return self._set("command_id", coerce_enum(CommandId, command_id, "command_id"))

    def amount(self, amount: float) -> Self:
        return self._set("amount", amount)

    def msisdn(self, msisdn: str) -> Self:
        """Phone number debited in the simulation."""
        return self._set("msisdn", msisdn)

    def bill_ref_number(self, bill_ref_number: str) -> Self:
        return self._set("bill_ref_number", bill_ref_number)

    def short_code(self, short_code: str) -> Self:
        return self._set("short_code", short_code)
