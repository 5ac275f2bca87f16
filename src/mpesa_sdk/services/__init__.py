"""Request specs and builders for each Daraja operation."""

from .account_balance import AccountBalanceBuilder, AccountBalanceRequest
from .b2b import B2bBuilder, B2bRequest
from .b2c import B2cBuilder, B2cRequest
from .bill_manager import (
    BulkInvoiceBuilder,
    BulkInvoiceRequest,
    CancelBulkInvoicesBuilder,
    CancelBulkInvoicesRequest,
    CancelInvoiceBuilder,
    CancelInvoiceRequest,
    OnboardBuilder,
    OnboardModifyBuilder,
    OnboardModifyRequest,
    OnboardRequest,
    ReconciliationBuilder,
    ReconciliationRequest,
    SingleInvoiceBuilder,
    SingleInvoiceRequest,
)
from .c2b import C2bRegisterBuilder, C2bRegisterRequest, C2bSimulateBuilder, C2bSimulateRequest
from .dynamic_qr import DynamicQrBuilder, DynamicQrRequest
from .express import (
    ExpressQueryBuilder,
    ExpressQueryRequest,
    ExpressRequest,
    ExpressRequestBuilder,
)
from .transaction import (
    TransactionReversalBuilder,
    TransactionReversalRequest,
    TransactionStatusBuilder,
    TransactionStatusRequest,
)

__all__ = [
    "AccountBalanceBuilder",
    "AccountBalanceRequest",
    "B2bBuilder",
    "B2bRequest",
    "B2cBuilder",
    "B2cRequest",
    "BulkInvoiceBuilder",
    "BulkInvoiceRequest",
    "C2bRegisterBuilder",
    "C2bRegisterRequest",
    "C2bSimulateBuilder",
    "C2bSimulateRequest",
    "CancelBulkInvoicesBuilder",
    "CancelBulkInvoicesRequest",
    "CancelInvoiceBuilder",
    "CancelInvoiceRequest",
    "DynamicQrBuilder",
    "DynamicQrRequest",
    "ExpressQueryBuilder",
    "ExpressQueryRequest",
    "ExpressRequest",
    "ExpressRequestBuilder",
    "OnboardBuilder",
    "OnboardModifyBuilder",
    "OnboardModifyRequest",
    "OnboardRequest",
    "ReconciliationBuilder",
    "ReconciliationRequest",
    "SingleInvoiceBuilder",
    "SingleInvoiceRequest",
    "TransactionReversalBuilder",
    "TransactionReversalRequest",
    "TransactionStatusBuilder",
    "TransactionStatusRequest",
]
