"""Transaction reversal and transaction status queries.

Both operations address an earlier M-Pesa transaction by its receipt
identifier and report their outcome asynchronously to ``result_url``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar, Self

from pydantic import BaseModel, Field

from ..constants import DEFAULT_REMARKS, CommandId, IdentifierTypes
from ..core.builder import RequestBuilder, RequestSpec, SpecT, coerce_enum
from ..models import TransactionReversalResponse, TransactionStatusResponse

if TYPE_CHECKING:
    from ..client import Mpesa


class TransactionReversalRequest(RequestSpec):
    path: ClassVar[str] = "mpesa/reversal/v1/request"
    privileged: ClassVar[bool] = True
    response_model: ClassVar[type[BaseModel]] = TransactionReversalResponse

    initiator: str = Field(..., min_length=1, serialization_alias="Initiator")
    command_id: CommandId = Field(..., serialization_alias="CommandID")
    transaction_id: str = Field(..., min_length=1, serialization_alias="TransactionID")
    receiver_party: str = Field(..., min_length=1, serialization_alias="ReceiverParty")
    receiver_identifier_type: IdentifierTypes = Field(
        ..., serialization_alias="RecieverIdentifierType"
    )
    result_url: str = Field(..., serialization_alias="ResultURL")
    timeout_url: str = Field(..., serialization_alias="QueueTimeOutURL")
    remarks: str = Field(..., serialization_alias="Remarks")
    occasion: str = Field(..., serialization_alias="Occasion")
    amount: float = Field(..., gt=0, serialization_alias="Amount")


class TransactionStatusRequest(RequestSpec):
    path: ClassVar[str] = "mpesa/transactionstatus/v1/query"
    privileged: ClassVar[bool] = True
    response_model: ClassVar[type[BaseModel]] = TransactionStatusResponse

    initiator: str = Field(..., min_length=1, serialization_alias="Initiator")
    command_id: CommandId = Field(..., serialization_alias="CommandID")
    transaction_id: str = Field(..., min_length=1, serialization_alias="TransactionID")
    party_a: str = Field(..., min_length=1, serialization_alias="PartyA")
    identifier_type: IdentifierTypes = Field(..., serialization_alias="IdentifierType")
    result_url: str = Field(..., serialization_alias="ResultURL")
    timeout_url: str = Field(..., serialization_alias="QueueTimeOutURL")
    remarks: str = Field(..., serialization_alias="Remarks")
    occasion: str = Field(..., serialization_alias="Occasion")


class _TransactionBuilder(RequestBuilder[SpecT]):
    """Setters shared by the reversal and status builders."""

    def command_id(self, command_id: CommandId | str) -> Self:
        return self._set("command_id", coerce_enum(CommandId, command_id, "command_id"))

    def transaction_id(self, transaction_id: str) -> Self:
        """M-Pesa receipt number of the original transaction."""
        return self._set("transaction_id", transaction_id)

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


class TransactionReversalBuilder(_TransactionBuilder[TransactionReversalRequest]):
    """Builds a reversal of a completed transaction."""

    spec_type = TransactionReversalRequest
    required = ("transaction_id", "receiver_party", "amount", "result_url", "timeout_url")

    def __init__(self, initiator_name: str, *, client: Mpesa | None = None) -> None:
        super().__init__(client=client)
        self._set("initiator", initiator_name)
        self._set("command_id", CommandId.TRANSACTION_REVERSAL)
        self._set("receiver_identifier_type", IdentifierTypes.REVERSAL)
        self._set("remarks", DEFAULT_REMARKS)
        self._set("occasion", DEFAULT_REMARKS)

    def receiver_party(self, receiver_party: str) -> Self:
        """Organization that received the original transaction."""
        return self._set("receiver_party", receiver_party)

    def receiver_identifier_type(self, identifier_type: IdentifierTypes | str) -> Self:
        return self._set(
            "receiver_identifier_type",
            coerce_enum(IdentifierTypes, identifier_type, "receiver_identifier_type"),
        )

    def amount(self, amount: float) -> Self:
        return self._set("amount", amount)


class TransactionStatusBuilder(_TransactionBuilder[TransactionStatusRequest]):
    """Builds a status query for a transaction."""

    spec_type = TransactionStatusRequest
    required = ("transaction_id", "party_a", "result_url", "timeout_url")

    def __init__(self, initiator_name: str, *, client: Mpesa | None = None) -> None:
        super().__init__(client=client)
        self._set("initiator", initiator_name)
        self._set("command_id", CommandId.TRANSACTION_STATUS_QUERY)
        self._set("identifier_type", IdentifierTypes.SHORT_CODE)
        self._set("remarks", DEFAULT_REMARKS)
        self._set("occasion", DEFAULT_REMARKS)

    def party_a(self, party_a: str) -> Self:
        """Organization or MSISDN that initiated the transaction."""
        return self._set("party_a", party_a)

    def identifier_type(self, identifier_type: IdentifierTypes | str) -> Self:
        return self._set(
            "identifier_type",
            coerce_enum(IdentifierTypes, identifier_type, "identifier_type"),
        )
