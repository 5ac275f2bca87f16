"""Structured logging and tracing for the M-Pesa SDK.

Log events go through structlog and spans through the OpenTelemetry API;
with no SDK installed by the application both are cheap no-ops. Event
dictionaries pass through :func:`redact_secrets` so a credential handed to
a log call by mistake is masked before rendering.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

import structlog
from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

if TYPE_CHECKING:
    from collections.abc import Generator, MutableMapping

    from .config import TelemetryConfig

SDK_NAME = "mpesa-sdk"
SDK_VERSION = "0.1.0"

# Keys whose values must never reach a log sink.
SECRET_KEYS = frozenset(
    {
        "access_token",
        "authorization",
        "client_secret",
        "initiator_password",
        "pass_key",
        "password",
        "security_credential",
        "securitycredential",
        "token",
    }
)
REDACTED = "**********"

_tracer: trace.Tracer | None = None
_logger: structlog.stdlib.BoundLogger | None = None


def redact_secrets(
    _logger: Any, _method: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """structlog processor masking values stored under secret keys."""
    for key in event_dict:
        if key.lower() in SECRET_KEYS:
            event_dict[key] = REDACTED
    return event_dict


def get_tracer() -> trace.Tracer:
    global _tracer
    if _tracer is None:
        _tracer = trace.get_tracer(SDK_NAME, SDK_VERSION)
    return _tracer


def get_logger() -> structlog.stdlib.BoundLogger:
    """Return the SDK logger, bound to the SDK name."""
    global _logger
    if _logger is None:
        _logger = structlog.get_logger(SDK_NAME).bind(sdk=SDK_NAME)
    return _logger


def configure_telemetry(config: TelemetryConfig) -> None:
    """Install JSON logging and a named tracer for the SDK.

    Applications that already configure structlog should skip this; the SDK
    logs through whatever configuration is active. With ``enabled=False``
    spans are dropped and log configuration is left untouched.
    """
    global _tracer, _logger

    if not config.enabled:
        _tracer = trace.NoOpTracer()
        return

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            redact_secrets,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelNamesMapping()[config.log_level]
        ),
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    _tracer = trace.get_tracer(config.service_name, SDK_VERSION)
    _logger = structlog.get_logger(config.service_name).bind(sdk=SDK_NAME)


def _span_value(value: Any) -> str | bool | int | float:
    if isinstance(value, (str, bool, int, float)):
        return value
    return str(value)


@contextmanager
def trace_operation(
    name: str,
    *,
    attributes: dict[str, Any] | None = None,
) -> Generator[trace.Span, None, None]:
    """Run the block inside a span.

    ``None`` attributes are skipped and non-primitive values are stored as
    strings. An exception marks the span as failed and is re-raised; SDK
    errors also record their ``error_code`` on the span.
    """
    with get_tracer().start_as_current_span(name) as span:
        for key, value in (attributes or {}).items():
            if value is not None:
                span.set_attribute(key, _span_value(value))
        try:
            yield span
        except Exception as e:
            code = getattr(e, "error_code", None)
            if code is not None:
                span.set_attribute("mpesa.error_code", str(code))
            span.set_status(Status(StatusCode.ERROR, type(e).__name__))
            span.record_exception(e)
            raise
