"""M-Pesa Daraja Python SDK."""

from .client import Mpesa
from .config import CacheConfig, ClientConfig, TelemetryConfig
from .constants import (
    CommandId,
    IdentifierTypes,
    MpesaResponseCode,
    ResponseType,
    SendRemindersTypes,
    TransactionType,
)
from .environment import ApiEnvironment, Environment
from .errors import (
    ApiError,
    AuthError,
    EncryptionError,
    ErrorCode,
    MpesaError,
    NetworkError,
    RequestTimeoutError,
    SerializationError,
    ValidationError,
)
from .models import Invoice, InvoiceItem
from .telemetry import configure_telemetry

__all__ = [
    "ApiEnvironment",
    "ApiError",
    "AuthError",
    "CacheConfig",
    "ClientConfig",
    "CommandId",
    "EncryptionError",
    "Environment",
    "ErrorCode",
    "IdentifierTypes",
    "Invoice",
    "InvoiceItem",
    "Mpesa",
    "MpesaError",
    "MpesaResponseCode",
    "NetworkError",
    "RequestTimeoutError",
    "ResponseType",
    "SendRemindersTypes",
    "SerializationError",
    "TelemetryConfig",
    "TransactionType",
    "ValidationError",
    "configure_telemetry",
]

__version__ = "0.1.0"
