"""Unit tests for the builder framework: required fields, URLs and enums."""

from __future__ import annotations

import pytest
from pydantic import ValidationError as PydanticValidationError

from mpesa_sdk.constants import CommandId, IdentifierTypes
from mpesa_sdk.core.builder import check_url, coerce_enum
from mpesa_sdk.errors import ErrorCode, ValidationError
from mpesa_sdk.models import InvoiceItem
from mpesa_sdk.services import (
    AccountBalanceBuilder,
    AccountBalanceRequest,
    B2cBuilder,
    BulkInvoiceBuilder,
    CancelBulkInvoicesBuilder,
    DynamicQrBuilder,
)


def _balance() -> AccountBalanceBuilder:
    return (
        AccountBalanceBuilder("testapi")
        .party_a("600496")
        .result_url("https://example.com/result")
        .timeout_url("https://example.com/timeout")
    )


class TestBuild:
    def test_builds_frozen_spec_with_defaults(self) -> None:
        spec = _balance().build()

        assert isinstance(spec, AccountBalanceRequest)
        assert spec.command_id is CommandId.ACCOUNT_BALANCE
        assert spec.identifier_type is IdentifierTypes.SHORT_CODE
        assert spec.remarks == "None"
        assert spec.privileged is True

    def test_missing_party_a_names_field(self) -> None:
        builder = (
            AccountBalanceBuilder("testapi")
            .result_url("https://example.com/result")
            .timeout_url("https://example.com/timeout")
        )

        with pytest.raises(ValidationError) as exc_info:
            builder.build()

        assert exc_info.value.field == "party_a"
        assert exc_info.value.error_code == ErrorCode.MISSING_FIELD

    def test_reports_first_missing_in_declaration_order(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            B2cBuilder("testapi").build()
        assert exc_info.value.field == "party_a"

    @pytest.mark.parametrize("amount", [0, -1, -0.5])
    def test_amount_must_be_positive(self, amount: float) -> None:
        builder = (
            B2cBuilder("testapi")
            .party_a("600496")
            .party_b("254708374149")
            .amount(amount)
            .result_url("https://example.com/result")
            .timeout_url("https://example.com/timeout")
        )

        with pytest.raises(ValidationError) as exc_info:
            builder.build()
        assert exc_info.value.field == "amount"

    @pytest.mark.parametrize("amount", [float("inf"), float("-inf"), float("nan")])
    def test_amount_must_be_finite(self, amount: float) -> None:
        builder = (
            B2cBuilder("testapi")
            .party_a("600496")
            .party_b("254708374149")
            .amount(amount)
            .result_url("https://example.com/result")
            .timeout_url("https://example.com/timeout")
        )

        with pytest.raises(ValidationError) as exc_info:
            builder.build()
        assert exc_info.value.field == "amount"

    def test_invoice_amounts_must_be_finite(self) -> None:
        with pytest.raises(PydanticValidationError):
            InvoiceItem(item_name="food", amount=float("inf"))

    def test_empty_initiator_is_rejected(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            AccountBalanceBuilder("").party_a("600496").result_url("a").timeout_url("b").build()
        assert exc_info.value.field == "initiator"

    def test_builder_can_be_reused(self) -> None:
        builder = _balance()
        first = builder.build()
        second = builder.party_a("600000").build()

        assert first.party_a == "600496"
        assert second.party_a == "600000"


class TestUrls:
    def test_unchecked_setter_accepts_anything(self) -> None:
        spec = _balance().result_url("not a url").build()
        assert spec.result_url == "not a url"

    def test_checked_setter_rejects_relative(self) -> None:
        builder = _balance().try_result_url("/callback")

        with pytest.raises(ValidationError) as exc_info:
            builder.build()

        assert exc_info.value.field == "result_url"
        assert exc_info.value.error_code == ErrorCode.INVALID_URL

    def test_checked_setter_accepts_https(self) -> None:
        spec = _balance().try_timeout_url("https://example.com/t").build()
        assert spec.timeout_url == "https://example.com/t"

    def test_unchecked_setter_clears_check(self) -> None:
        spec = _balance().try_result_url("bad").result_url("bad").build()
        assert spec.result_url == "bad"

    @pytest.mark.parametrize(
        "url",
        ["ftp://example.com/x", "example.com/path", "https://", "mailto:a@b.c"],
    )
    def test_check_url_rejects(self, url: str) -> None:
        with pytest.raises(ValidationError):
            check_url(url, "callback_url")

    @pytest.mark.parametrize(
        "url", ["http://localhost:8000/cb", "https://example.com/a?b=c"]
    )
    def test_check_url_accepts(self, url: str) -> None:
        assert check_url(url, "callback_url") == url


class TestEnums:
    def test_setter_coerces_string(self) -> None:
        spec = _balance().identifier_type("1").build()
        assert spec.identifier_type is IdentifierTypes.MSISDN

    def test_unknown_code_fails_at_setter(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            _balance().command_id("Teleport")
        assert exc_info.value.field == "command_id"

    def test_qr_transaction_type(self) -> None:
        with pytest.raises(ValidationError):
            DynamicQrBuilder().transaction_type("XX")

    def test_coerce_enum_lists_allowed(self) -> None:
        with pytest.raises(ValidationError, match="BusinessPayment"):
            coerce_enum(CommandId, "nope", "command_id")


class TestListBuilders:
    def test_bulk_invoice_requires_one(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            BulkInvoiceBuilder().build()
        assert exc_info.value.field == "invoices"

    def test_bulk_invoice_rejects_empty_list(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            BulkInvoiceBuilder().invoices([]).build()
        assert exc_info.value.field == "invoices"

    def test_cancel_bulk_requires_one(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            CancelBulkInvoicesBuilder().build()
        assert exc_info.value.field == "external_references"


class TestSend:
    @pytest.mark.asyncio
    async def test_unbound_builder_cannot_send(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            await _balance().send()
        assert exc_info.value.field == "client"
