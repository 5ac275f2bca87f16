"""Account balance inquiry for a business short code."""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar, Self

from pydantic import BaseModel, Field

from ..constants import DEFAULT_REMARKS, CommandId, IdentifierTypes
from ..core.builder import RequestBuilder, RequestSpec, coerce_enum
from ..models import AccountBalanceResponse

if TYPE_CHECKING:
    from ..client import Mpesa


class AccountBalanceRequest(RequestSpec):
    path: ClassVar[str] = "mpesa/accountbalance/v1/query"
    privileged: ClassVar[bool] = True
    response_model: ClassVar[type[BaseModel]] = AccountBalanceResponse

    initiator: str = Field(..., min_length=1, serialization_alias="Initiator")
    command_id: CommandId = Field(..., serialization_alias="CommandID")
    party_a: str = Field(..., min_length=1, serialization_alias="PartyA")
    identifier_type: IdentifierTypes = Field(..., serialization_alias="IdentifierType")
    remarks: str = Field(..., serialization_alias="Remarks")
    timeout_url: str = Field(..., serialization_alias="QueueTimeOutURL")
    result_url: str = Field(..., serialization_alias="ResultURL")


class AccountBalanceBuilder(RequestBuilder[AccountBalanceRequest]):
    """Builds a balance inquiry.

    The balance itself is posted to ``result_url`` once processed.
    """

    spec_type = AccountBalanceRequest
    required = ("party_a", "result_url", "timeout_url")

    def __init__(self, initiator_name: str, *, client: Mpesa | None = None) -> None:
        super().__init__(client=client)
        self._set("initiator", initiator_name)
        self._set("command_id", CommandId.ACCOUNT_BALANCE)
        self._set("identifier_type", IdentifierTypes.SHORT_CODE)
        self._set("remarks", DEFAULT_REMARKS)

    def command_id(self, command_id: CommandId | str) -> Self:
        return self._set("command_id", coerce_enum(CommandId, command_id, "command_id"))

    def party_a(self, party_a: str) -> Self:
        """Short code of the organization whose balance is queried."""
        return self._set("party_a", party_a)

    def identifier_type(self, identifier_type: IdentifierTypes | str) -> Self:
        return self._set(
            "identifier_type",
            coerce_enum(IdentifierTypes, identifier_type, "identifier_type"),
        )

    def remarks(self, remarks: str) -> Self:
        return self._set("remarks", remarks)

    def result_url(self, url: str) -> Self:
        return self._set_url("result_url", url, validate=False)

    def try_result_url(self, url: str) -> Self:
        return self._set_url("result_url", url, validate=True)

    def timeout_url(self, url: str) -> Self:
        return self._set_url("timeout_url", url, validate=False)

    def try_timeout_url(self, url: str) -> Self:
        return self._set_url("timeout_url", url, validate=True)
