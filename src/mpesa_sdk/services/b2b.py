"""Business to business transfers."""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar, Self

from pydantic import BaseModel, Field

from ..constants import DEFAULT_REMARKS, CommandId, IdentifierTypes
from ..core.builder import RequestBuilder, RequestSpec, coerce_enum
from ..models import B2bResponse

if TYPE_CHECKING:
    from ..client import Mpesa


class B2bRequest(RequestSpec):
    path: ClassVar[str] = "mpesa/b2b/v1/paymentrequest"
    privileged: ClassVar[bool] = True
    response_model: ClassVar[type[BaseModel]] = B2bResponse

    initiator: str = Field(..., min_length=1, serialization_alias="Initiator")
    command_id: CommandId = Field(..., serialization_alias="CommandID")
    amount: float = Field(..., gt=0, serialization_alias="Amount")
    party_a: str = Field(..., min_length=1, serialization_alias="PartyA")
    sender_identifier_type: IdentifierTypes = Field(
        ..., serialization_alias="SenderIdentifierType"
    )
    party_b: str = Field(..., min_length=1, serialization_alias="PartyB")
    # Provider spelling.
    receiver_identifier_type: IdentifierTypes = Field(
        ..., serialization_alias="RecieverIdentifierType"
    )
    remarks: str = Field(..., serialization_alias="Remarks")
    timeout_url: str | None = Field(default=None, serialization_alias="QueueTimeOutURL")
    result_url: str | None = Field(default=None, serialization_alias="ResultURL")
    account_ref: str | None = Field(default=None, serialization_alias="AccountReference")


class B2bBuilder(RequestBuilder[B2bRequest]):
    """Builds a transfer between two organization short codes."""

    spec_type = B2bRequest
    required = ("party_a", "party_b", "amount")

    def __init__(self, initiator_name: str, *, client: Mpesa | None = None) -> None:
        super().__init__(client=client)
        self._set("initiator", initiator_name)
        self._set("command_id", CommandId.BUSINESS_TO_BUSINESS_TRANSFER)
        self._set("sender_identifier_type", IdentifierTypes.SHORT_CODE)
        self._set("receiver_identifier_type", IdentifierTypes.SHORT_CODE)
        self._set("remarks", DEFAULT_REMARKS)

    def command_id(self, command_id: CommandId | str) -> Self:
        return self._set("command_id", coerce_enum(CommandId, command_id, "command_id"))

    def amount(self, amount: float) -> Self:
        return self._set("amount", amount)

    def party_a(self, party_a: str) -> Self:
        return self._set("party_a", party_a)

    def sender_identifier_type(self, identifier_type: IdentifierTypes | str) -> Self:
        return self._set(
            "sender_identifier_type",
            coerce_enum(IdentifierTypes, identifier_type, "sender_identifier_type"),
        )

    def party_b(self, party_b: str) -> Self:
        return self._set("party_b", party_b)

    def receiver_identifier_type(self, identifier_type: IdentifierTypes | str) -> Self:
        return self._set(
            "receiver_identifier_type",
            coerce_enum(IdentifierTypes, identifier_type, "receiver_identifier_type"),
        )

    def remarks(self, remarks: str) -> Self:
        return self._set("remarks", remarks)

    def account_ref(self, account_ref: str) -> Self:
        return self._set("account_ref", account_ref)

    def result_url(self, url: str) -> Self:
        return self._set_url("result_url", url, validate=False)

    def try_result_url(self, url: str) -> Self:
        return self._set_url("result_url", url, validate=True)

    def timeout_url(self, url: str) -> Self:
        return self._set_url("timeout_url", url, validate=False)

    def try_timeout_url(self, url: str) -> Self:
        return self._set_url("timeout_url", url, validate=True)
