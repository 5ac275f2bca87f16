"""Access token cache with single-flight refresh.

Concurrent callers that find the cache empty or stale share one in-flight
authentication exchange and all observe its outcome. The exchange runs as
its own task, so a caller that is cancelled while waiting does not cancel
the refresh for everyone else.
"""

from __future__ import annotations

import asyncio
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from ..errors import MpesaError
from ..telemetry import get_logger, trace_operation

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from ..models import AccessToken


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _consume_exception(task: asyncio.Task[AccessToken]) -> None:
    # Failures are delivered to waiters; an unawaited failure must not warn.
    if not task.cancelled():
        task.exception()


class TokenCache:
    """Async-safe bearer token cache owned by a single client."""

    def __init__(
        self,
        fetch: Callable[[], Awaitable[AccessToken]],
        *,
        margin_seconds: int = 60,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize token cache.

        Args:
            fetch: Coroutine function performing one authentication exchange.
            margin_seconds: Seconds subtracted from the token expiry, capped
                at half the lifetime of each fetched token.
            clock: Source of the current UTC time.
        """
        self._fetch = fetch
        self.margin_seconds = margin_seconds
        self._clock = clock or _utcnow
        self._token: AccessToken | None = None
        self._margin = float(margin_seconds)
        self._refresh: asyncio.Task[AccessToken] | None = None

    @property
    def cached_token(self) -> AccessToken | None:
        """Token currently held, possibly stale."""
        return self._token

    @property
    def refreshing(self) -> bool:
        return self._refresh is not None

    def is_valid(self) -> bool:
        """Check if the cached token can be handed out without a refresh."""
        return self._token is not None and not self._token.is_expired(
            margin_seconds=self._margin, now=self._clock()
        )

    def invalidate(self) -> None:
        """Drop the cached token. An in-flight refresh is left running."""
        self._token = None

    async def get_token(self) -> AccessToken:
        """Return a valid token, refreshing it at most once concurrently.

        Raises:
            AuthError: If the credentials were rejected.
            NetworkError: If the exchange failed in transit.
            SerializationError: If the token response was malformed.
        """
        token = self._token
        if token is not None and self.is_valid():
            get_logger().debug("token_cache_hit")
            return token

        if self._refresh is None:
            self._refresh = asyncio.get_running_loop().create_task(self._run_refresh())
            self._refresh.add_done_callback(_consume_exception)
        else:
            get_logger().debug("token_refresh_joined")

        return await asyncio.shield(self._refresh)

    async def _run_refresh(self) -> AccessToken:
        try:
            with trace_operation("token_refresh"):
                get_logger().info("token_refresh_started")
                try:
                    token = await self._fetch()
                except MpesaError as e:
                    get_logger().warning("token_refresh_failed", error_code=e.error_code)
                    raise
                # A margin longer than the lifetime would make a fresh token stale.
                lifetime = (token.expires_at - self._clock()).total_seconds()
                self._margin = min(float(self.margin_seconds), max(lifetime, 0.0) / 2)
                self._token = token
                get_logger().info(
                    "token_refresh_completed",
                    expires_at=token.expires_at.isoformat(),
                )
                return token
        finally:
            self._refresh = None
