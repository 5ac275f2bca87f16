"""Closed enumerations used on the wire by the Daraja API."""

from __future__ import annotations

from enum import StrEnum


class CommandId(StrEnum):
    """Unique command passed to the M-Pesa system with each transaction."""

    TRANSACTION_REVERSAL = "TransactionReversal"
    SALARY_PAYMENT = "SalaryPayment"
    BUSINESS_PAYMENT = "BusinessPayment"
    PROMOTION_PAYMENT = "PromotionPayment"
    ACCOUNT_BALANCE = "AccountBalance"
    CUSTOMER_PAY_BILL_ONLINE = "CustomerPayBillOnline"
    CUSTOMER_BUY_GOODS_ONLINE = "CustomerBuyGoodsOnline"
    TRANSACTION_STATUS_QUERY = "TransactionStatusQuery"
    CHECK_IDENTITY = "CheckIdentity"
    BUSINESS_PAY_BILL = "BusinessPayBill"
    BUSINESS_BUY_GOODS = "BusinessBuyGoods"
    DISBURSE_FUNDS_TO_BUSINESS = "DisburseFundsToBusiness"
    BUSINESS_TO_BUSINESS_TRANSFER = "BusinessToBusinessTransfer"
    BUSINESS_TRANSFER_FROM_MMF_TO_UTILITY = "BusinessTransferFromMMFToUtility"


class IdentifierTypes(StrEnum):
    """Kind of party identifier: phone number, till, shortcode or reversal."""

    MSISDN = "1"
    TILL_NUMBER = "2"
    SHORT_CODE = "4"
    REVERSAL = "11"


class ResponseType(StrEnum):
    """Action taken by M-Pesa when the validation URL is unreachable."""

    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


class TransactionType(StrEnum):
    """Transaction codes accepted by the dynamic QR endpoint."""

    BUY_GOODS = "BG"
    WITHDRAW_AT_AGENT = "WA"
    PAY_BILL = "PB"
    SEND_MONEY = "SM"
    SEND_TO_BUSINESS = "SB"


class SendRemindersTypes(StrEnum):
    """Whether bill manager sends payment reminders for invoices."""

    ENABLE = "1"
    DISABLE = "0"


class MpesaResponseCode(StrEnum):
    """Result codes documented by the provider."""

    SUCCESS = "0"
    INSUFFICIENT_FUNDS = "1"
    LESS_THAN_MINIMUM = "2"
    MORE_THAN_MAXIMUM = "3"
    EXCEEDED_DAILY_LIMIT = "4"
    EXCEEDED_MINIMUM_BALANCE = "5"
    UNRESOLVED_PRIMARY_PARTY = "6"
    UNRESOLVED_RECEIVER_PARTY = "7"
    EXCEEDED_MAXIMUM_BALANCE = "8"
    INVALID_DEBIT_ACCOUNT = "11"
    INVALID_CREDIT_ACCOUNT = "12"
    UNRESOLVED_DEBIT_ACCOUNT = "13"
    UNRESOLVED_CREDIT_ACCOUNT = "14"
    DUPLICATE_DETECTED = "15"
    INTERNAL_FAILURE = "17"
    UNRESOLVED_INITIATOR = "20"
    TRAFFIC_BLOCKING = "26"


# Sandbox initiator password and Lipa Na M-Pesa Online passkey published
# on the developer portal.
DEFAULT_INITIATOR_PASSWORD = "Safcom496!"
DEFAULT_PASSKEY = "bfb279f9aa9bdbcf158e97dd71a467cd2e0c893059b10f78e6b72ada1ed2c919"

DEFAULT_REMARKS = "None"
