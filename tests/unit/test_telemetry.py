"""Unit tests for telemetry helpers."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import httpx
import pytest
from opentelemetry import trace

from mpesa_sdk import Mpesa, telemetry
from mpesa_sdk.config import ClientConfig, TelemetryConfig
from mpesa_sdk.errors import NetworkError

if TYPE_CHECKING:
    from conftest import DarajaStub, StaticEnvironment


class TestTelemetry:
    def test_disabled_uses_noop_tracer(self) -> None:
        telemetry.configure_telemetry(TelemetryConfig(enabled=False))
        assert isinstance(telemetry.get_tracer(), trace.NoOpTracer)

    def test_enabled_configures_logger(self) -> None:
        telemetry.configure_telemetry(TelemetryConfig(service_name="payments"))
        assert telemetry.get_logger() is not None
        assert telemetry.get_tracer() is not None

    def test_trace_operation_reraises(self) -> None:
        with pytest.raises(RuntimeError, match="boom"):
            with telemetry.trace_operation("failing", attributes={"k": "v"}):
                raise RuntimeError("boom")

    def test_trace_operation_yields_span(self) -> None:
        with telemetry.trace_operation("ok") as span:
            assert span is not None

    def test_trace_operation_reraises_sdk_error(self) -> None:
        with pytest.raises(NetworkError):
            with telemetry.trace_operation("dispatch", attributes={"skipped": None}):
                raise NetworkError()


class TestRedaction:
    def test_secret_keys_are_masked(self) -> None:
        event = {
            "event": "token_refresh_completed",
            "access_token": "abc",
            "Authorization": "Bearer abc",
            "SecurityCredential": "c2VjcmV0",
            "operation": "B2cRequest",
        }

        redacted = telemetry.redact_secrets(None, "info", event)

        assert redacted["access_token"] == telemetry.REDACTED
        assert redacted["Authorization"] == telemetry.REDACTED
        assert redacted["SecurityCredential"] == telemetry.REDACTED
        assert redacted["operation"] == "B2cRequest"
        assert redacted["event"] == "token_refresh_completed"


class RecordingLogger:
    def __init__(self) -> None:
        self.events: list[str] = []

    def _record(self, event: str, **_: Any) -> None:
        self.events.append(event)

    debug = info = warning = error = _record


class TestClientTelemetry:
    def _client(
        self,
        daraja: DarajaStub,
        environment: StaticEnvironment,
        config: ClientConfig | None = None,
    ) -> Mpesa:
        return Mpesa(
            "K",
            "S",
            environment,
            config=config,
            http_client=httpx.AsyncClient(transport=daraja.transport()),
        )

    def test_explicit_telemetry_section_is_applied(
        self, daraja: DarajaStub, environment: StaticEnvironment
    ) -> None:
        self._client(
            daraja,
            environment,
            ClientConfig(telemetry=TelemetryConfig(enabled=False)),
        )
        assert isinstance(telemetry.get_tracer(), trace.NoOpTracer)

    def test_default_config_leaves_telemetry_alone(
        self, daraja: DarajaStub, environment: StaticEnvironment
    ) -> None:
        telemetry.configure_telemetry(TelemetryConfig(enabled=False))

        self._client(daraja, environment, ClientConfig(timeout=5.0))

        assert isinstance(telemetry.get_tracer(), trace.NoOpTracer)

    @pytest.mark.asyncio
    async def test_existing_client_logs_through_later_configuration(
        self,
        daraja: DarajaStub,
        environment: StaticEnvironment,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        client = self._client(daraja, environment)
        recorder = RecordingLogger()
        monkeypatch.setattr(telemetry, "_logger", recorder)

        await client.auth()
        await client.auth()

        assert recorder.events == [
            "token_refresh_started",
            "token_refresh_completed",
            "token_cache_hit",
        ]
