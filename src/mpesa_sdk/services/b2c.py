"""Business to customer payments."""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar, Self

from pydantic import BaseModel, Field

from ..constants import DEFAULT_REMARKS, CommandId
from ..core.builder import RequestBuilder, RequestSpec, coerce_enum
from ..models import B2cResponse

if TYPE_CHECKING:
    from ..client import Mpesa


class B2cRequest(RequestSpec):
    path: ClassVar[str] = "mpesa/b2c/v1/paymentrequest"
    privileged: ClassVar[bool] = True
    response_model: ClassVar[type[BaseModel]] = B2cResponse

    initiator_name: str = Field(..., min_length=1, serialization_alias="InitiatorName")
    command_id: CommandId = Field(..., serialization_alias="CommandID")
    amount: float = Field(..., gt=0, serialization_alias="Amount")
    party_a: str = Field(..., min_length=1, serialization_alias="PartyA")
    party_b: str = Field(..., min_length=1, serialization_alias="PartyB")
    remarks: str = Field(..., serialization_alias="Remarks")
    timeout_url: str = Field(..., serialization_alias="QueueTimeOutURL")
    result_url: str = Field(..., serialization_alias="ResultURL")
    occasion: str = Field(..., serialization_alias="Occasion")


class B2cBuilder(RequestBuilder[B2cRequest]):
    """Builds a payment from a business short code to a customer phone number."""

    spec_type = B2cRequest
    required = ("party_a", "party_b", "amount", "result_url", "timeout_url")

    def __init__(self, initiator_name: str, *, client: Mpesa | None = None) -> None:
        super().__init__(client=client)
        self._set("initiator_name", initiator_name)
        self._set("command_id", CommandId.BUSINESS_PAYMENT)
        self._set("remarks", DEFAULT_REMARKS)
        self._set("occasion", DEFAULT_REMARKS)

    def command_id(self, command_id: CommandId | str) -> Self:
        """One of SalaryPayment, BusinessPayment or PromotionPayment."""
        return self._set("command_id", coerce_enum(CommandId, command_id, "command_id"))

    def amount(self, amount: float) -> Self:
        return self._set("amount", amount)

    def party_a(self, party_a: str) -> Self:
        """Sending organization short code."""
        return self._set("party_a", party_a)

    def party_b(self, party_b: str) -> Self:
        """Receiving customer phone number."""
        return self._set("party_b", party_b)

    def remarks(self, remarks: str) -> Self:
        return self._set("remarks", remarks)

    def occasion(self, occasion: str) -> Self:
        return self._set("occasion", occasion)

    def result_url(self, url: str) -> Self:
        return self._set_url("result_url", url, validate=False)

    def try_result_url(self, url: str) -> Self:
        return self._set_url("result_url", url, validate=True)

    def timeout_url(self, url: str) -> Self:
        return self._set_url("timeout_url", url, validate=False)

    def try_timeout_url(self, url: str) -> Self:
        return self._set_url("timeout_url", url, validate=True)
