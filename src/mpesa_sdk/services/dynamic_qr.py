"""Dynamic QR code generation for merchant payments."""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar, Self

from pydantic import BaseModel, Field

from ..constants import TransactionType
from ..core.builder import RequestBuilder, RequestSpec, coerce_enum
from ..models import DynamicQrResponse

if TYPE_CHECKING:
    from ..client import Mpesa

DEFAULT_QR_SIZE = "300"


class DynamicQrRequest(RequestSpec):
    path: ClassVar[str] = "mpesa/qrcode/v1/generate"
    response_model: ClassVar[type[BaseModel]] = DynamicQrResponse

    merchant_name: str = Field(..., min_length=1, serialization_alias="MerchantName")
    ref_no: str = Field(..., min_length=1, serialization_alias="RefNo")
    amount: float = Field(..., gt=0, serialization_alias="Amount")
    transaction_type: TransactionType = Field(..., serialization_alias="TrxCode")
    credit_party_identifier: str = Field(..., min_length=1, serialization_alias="CPI")
    size: str = Field(..., pattern=r"^\d+$", serialization_alias="Size")


class DynamicQrBuilder(RequestBuilder[DynamicQrRequest]):
    """Builds a QR code request; the response carries the image as base64."""

    spec_type = DynamicQrRequest
    required = (
        "merchant_name",
        "ref_no",
        "amount",
        "transaction_type",
        "credit_party_identifier",
    )

    def __init__(self, *, client: Mpesa | None = None) -> None:
        super().__init__(client=client)
        self._set("size", DEFAULT_QR_SIZE)

    def merchant_name(self, merchant_name: str) -> Self:
        return self._set("merchant_name", merchant_name)

    def ref_no(self, ref_no: str) -> Self:
        return self._set("ref_no", ref_no)

    def amount(self, amount: float) -> Self:
        return self._set("amount", amount)

    def transaction_type(self, transaction_type: TransactionType | str) -> Self:
        return self._set(
            "transaction_type",
            coerce_enum(TransactionType, transaction_type, "transaction_type"),
        )

    def credit_party_identifier(self, identifier: str) -> Self:
        """Till, paybill, phone number or agent number credited by the payment."""
        return self._set("credit_party_identifier", identifier)

    def size(self, size: str | int) -> Self:
        """Edge length of the generated image in pixels."""
        return self._set("size", str(size))
