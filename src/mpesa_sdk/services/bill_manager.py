"""Bill manager: merchant onboarding, invoicing and payment reconciliation.

Unlike the other endpoints these bodies use camelCase names, and a result
is reported through ``rescode`` / ``resmsg`` rather than ``ResponseCode``.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any, ClassVar, Self

from pydantic import BaseModel, Field

from ..constants import SendRemindersTypes
from ..core.builder import RequestBuilder, RequestSpec, coerce_enum
from ..models import BillManagerResponse, Invoice, InvoiceItem, OnboardResponse

if TYPE_CHECKING:
    from collections.abc import Iterable

    from ..client import Mpesa

_PREFIX = "v1/billmanager-invoice"


class OnboardRequest(RequestSpec):
    path: ClassVar[str] = f"{_PREFIX}/optin"
    response_model: ClassVar[type[BaseModel]] = OnboardResponse

    callback_url: str = Field(..., serialization_alias="callbackUrl")
    email: str = Field(..., min_length=1)
    logo: str = Field(..., min_length=1)
    official_contact: str = Field(..., min_length=1, serialization_alias="officialContact")
    send_reminders: SendRemindersTypes = Field(..., serialization_alias="sendReminders")
    short_code: str = Field(..., min_length=1, serialization_alias="shortcode")


class OnboardBuilder(RequestBuilder[OnboardRequest]):
    """Opts a short code into bill manager."""

    spec_type = OnboardRequest
    required = ("callback_url", "email", "logo", "official_contact", "short_code")

    def __init__(self, *, client: Mpesa | None = None) -> None:
        super().__init__(client=client)
        self._set("send_reminders", SendRemindersTypes.DISABLE)

    def callback_url(self, url: str) -> Self:
        return self._set_url("callback_url", url, validate=False)

    def try_callback_url(self, url: str) -> Self:
        return self._set_url("callback_url", url, validate=True)

    def email(self, email: str) -> Self:
        return self._set("email", email)

    def logo(self, logo: str) -> Self:
        """Image embedded in invoices and receipts."""
        return self._set("logo", logo)

    def official_contact(self, official_contact: str) -> Self:
        return self._set("official_contact", official_contact)

    def send_reminders(self, send_reminders: SendRemindersTypes | str) -> Self:
        return self._set(
            "send_reminders",
            coerce_enum(SendRemindersTypes, send_reminders, "send_reminders"),
        )

    def short_code(self, short_code: str) -> Self:
        return self._set("short_code", short_code)


class OnboardModifyRequest(RequestSpec):
    path: ClassVar[str] = f"{_PREFIX}/change-optin-details"
    response_model: ClassVar[type[BaseModel]] = BillManagerResponse

    callback_url: str | None = Field(default=None, serialization_alias="callbackUrl")
    email: str | None = None
    logo: str | None = None
    official_contact: str | None = Field(
        default=None, serialization_alias="officialContact"
    )
    send_reminders: SendRemindersTypes | None = Field(
        default=None, serialization_alias="sendReminders"
    )
    short_code: str | None = Field(default=None, serialization_alias="shortcode")


class OnboardModifyBuilder(OnboardBuilder):
    """Changes opt-in details. Only the fields set are sent."""

    spec_type = OnboardModifyRequest  # type: ignore[assignment]
    required = ()

    def __init__(self, *, client: Mpesa | None = None) -> None:
        RequestBuilder.__init__(self, client=client)


class SingleInvoiceRequest(RequestSpec, Invoice):
    path: ClassVar[str] = f"{_PREFIX}/single-invoicing"
    response_model: ClassVar[type[BaseModel]] = BillManagerResponse


class SingleInvoiceBuilder(RequestBuilder[SingleInvoiceRequest]):
    """Sends one invoice to a customer."""

    spec_type = SingleInvoiceRequest
    required = (
        "amount",
        "account_reference",
        "billed_full_name",
        "billed_period",
        "billed_phone_number",
        "due_date",
        "external_reference",
        "invoice_name",
    )

    def amount(self, amount: float) -> Self:
        return self._set("amount", amount)

    def account_reference(self, account_reference: str) -> Self:
        return self._set("account_reference", account_reference)

    def billed_full_name(self, billed_full_name: str) -> Self:
        return self._set("billed_full_name", billed_full_name)

    def billed_period(self, billed_period: str) -> Self:
        """Month and year being billed, e.g. ``"August 2021"``."""
        return self._set("billed_period", billed_period)

    def billed_phone_number(self, billed_phone_number: str) -> Self:
        return self._set("billed_phone_number", billed_phone_number)

    def due_date(self, due_date: datetime) -> Self:
        return self._set("due_date", due_date)

    def external_reference(self, external_reference: str) -> Self:
        """Merchant-side identifier, also used to cancel the invoice."""
        return self._set("external_reference", external_reference)

    def invoice_items(self, items: Iterable[InvoiceItem]) -> Self:
        return self._set("invoice_items", tuple(items))

    def invoice_name(self, invoice_name: str) -> Self:
        return self._set("invoice_name", invoice_name)


class BulkInvoiceRequest(RequestSpec):
    path: ClassVar[str] = f"{_PREFIX}/bulk-invoicing"
    response_model: ClassVar[type[BaseModel]] = BillManagerResponse

    invoices: tuple[Invoice, ...] = Field(..., min_length=1)

    def to_payload(self) -> list[dict[str, Any]]:
        return [
            invoice.model_dump(by_alias=True, exclude_none=True, mode="json")
            for invoice in self.invoices
        ]


class BulkInvoiceBuilder(RequestBuilder[BulkInvoiceRequest]):
    """Sends several invoices in one call."""

    spec_type = BulkInvoiceRequest
    required = ("invoices",)

    def invoice(self, invoice: Invoice) -> Self:
        self._values.setdefault("invoices", []).append(invoice)
        return self

    def invoices(self, invoices: Iterable[Invoice]) -> Self:
        self._values.setdefault("invoices", []).extend(invoices)
        return self

    def _spec_values(self) -> dict[str, Any]:
        return {"invoices": tuple(self._values["invoices"])}


class CancelInvoiceRequest(RequestSpec):
    path: ClassVar[str] = f"{_PREFIX}/cancel-single-invoice"
    response_model: ClassVar[type[BaseModel]] = BillManagerResponse

    external_reference: str = Field(
        ..., min_length=1, serialization_alias="externalReference"
    )


class CancelInvoiceBuilder(RequestBuilder[CancelInvoiceRequest]):
    """Cancels one unpaid invoice by its external reference."""

    spec_type = CancelInvoiceRequest
    required = ("external_reference",)

    def external_reference(self, external_reference: str) -> Self:
        return self._set("external_reference", external_reference)


class CancelBulkInvoicesRequest(RequestSpec):
    path: ClassVar[str] = f"{_PREFIX}/cancel-bulk-invoices"
    response_model: ClassVar[type[BaseModel]] = BillManagerResponse

    external_references: tuple[str, ...] = Field(..., min_length=1)

    def to_payload(self) -> list[dict[str, Any]]:
        return [{"externalReference": ref} for ref in self.external_references]


class CancelBulkInvoicesBuilder(RequestBuilder[CancelBulkInvoicesRequest]):
    """Cancels several unpaid invoices."""

    spec_type = CancelBulkInvoicesRequest
    required = ("external_references",)

    def external_reference(self, external_reference: str) -> Self:
        self._values.setdefault("external_references", []).append(external_reference)
        return self

    def external_references(self, external_references: Iterable[str]) -> Self:
        self._values.setdefault("external_references", []).extend(external_references)
        return self

    def _spec_values(self) -> dict[str, Any]:
        return {"external_references": tuple(self._values["external_references"])}


class ReconciliationRequest(RequestSpec):
    path: ClassVar[str] = f"{_PREFIX}/reconciliation"
    response_model: ClassVar[type[BaseModel]] = BillManagerResponse

    account_reference: str = Field(
        ..., min_length=1, serialization_alias="accountReference"
    )
    date_created: datetime = Field(..., serialization_alias="dateCreated")
    msisdn: str = Field(..., min_length=1)
    paid_amount: float = Field(..., gt=0, serialization_alias="paidAmount")
    short_code: str = Field(..., min_length=1, serialization_alias="shortCode")
    transaction_id: str = Field(..., min_length=1, serialization_alias="transactionId")


class ReconciliationBuilder(RequestBuilder[ReconciliationRequest]):
    """Reports a payment received outside bill manager against an invoice."""

    spec_type = ReconciliationRequest
    required = (
        "account_reference",
        "date_created",
        "paid_amount",
        "msisdn",
        "short_code",
        "transaction_id",
    )

    def account_reference(self, account_reference: str) -> Self:
        return self._set("account_reference", account_reference)

    def date_created(self, date_created: datetime) -> Self:
        return self._set("date_created", date_created)

    def paid_amount(self, paid_amount: float) -> Self:
        return self._set("paid_amount", paid_amount)

    def msisdn(self, msisdn: str) -> Self:
        return self._set("msisdn", msisdn)

    def short_code(self, short_code: str) -> Self:
        return self._set("short_code", short_code)

    def transaction_id(self, transaction_id: str) -> Self:
        """M-Pesa receipt number of the payment."""
        return self._set("transaction_id", transaction_id)
