"""StatusPoller — fetches the status document on a fixed schedule.

The poller owns two pieces of state, both replaced whole after each fetch
attempt:

* ``status`` — the last document that parsed and validated, or ``None``.
* ``connection_state`` — consecutive-failure bookkeeping.

Every failure (transport, HTTP, JSON, schema) counts exactly once and leaves
``status`` untouched, so the display keeps showing the last known good value
while it reports degraded connectivity.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import TYPE_CHECKING, Callable

import httpx
from opentelemetry import trace

from agentface.status.errors import StatusFetchError, StatusHTTPError, StatusTransportError
from agentface.status.models import AgentStatus, ConnectionState, decode_status
from agentface.status.ticker import AsyncioTicker
from agentface.utils.telemetry import (
    ATTR_STATUS_FAILURE_COUNT,
    ATTR_STATUS_HTTP_STATUS,
    ATTR_STATUS_OUTCOME,
    ATTR_STATUS_URL,
    get_tracer,
)

if TYPE_CHECKING:
    from agentface.status.ticker import Ticker

logger = logging.getLogger(__name__)
_tracer = get_tracer(__name__)

DEFAULT_INTERVAL_MS = 5000
DEFAULT_MAX_FAILURES = 3
DEFAULT_TIMEOUT_S = 5.0

StatusListener = Callable[[AgentStatus | None, ConnectionState], None]


def _wall_clock_ms() -> int:
    return int(time.time() * 1000)


class StatusPoller:
    """Polls a status URL and tracks connectivity.

    Usage::

        async with StatusPoller("https://bucket.example.com/status.json") as poller:
            poller.subscribe(lambda status, conn: print(status, conn))
            poller.start()
            await asyncio.sleep(30)

    ``start()`` fires one attempt immediately, then one every
    ``interval_ms`` at a fixed rate.  Attempts are never skipped because an
    earlier one is still outstanding; the request timeout bounds how long
    any single attempt can hang.
    """

    def __init__(
        self,
        url: str,
        *,
        interval_ms: int = DEFAULT_INTERVAL_MS,
        max_failures: int = DEFAULT_MAX_FAILURES,
        timeout_s: float = DEFAULT_TIMEOUT_S,
        client: httpx.AsyncClient | None = None,
        ticker: Ticker | None = None,
        clock: Callable[[], int] | None = None,
    ) -> None:
        if interval_ms <= 0:
            msg = f"interval_ms must be positive, got {interval_ms}"
            raise ValueError(msg)
        if max_failures < 1:
            msg = f"max_failures must be at least 1, got {max_failures}"
            raise ValueError(msg)

        self._url = url
        self._interval_ms = interval_ms
        self._max_failures = max_failures
        self._timeout_s = timeout_s
        self._client = client
        self._owns_client = client is None
        self._ticker: Ticker = ticker or AsyncioTicker()
        self._clock = clock or _wall_clock_ms

        self._status: AgentStatus | None = None
        self._connection = ConnectionState.initial()
        self._last_error: StatusFetchError | None = None
        self._running = False
        self._inflight: set[asyncio.Task[None]] = set()
        self._listeners: list[StatusListener] = []

    async def __aenter__(self) -> StatusPoller:
        return self

    async def __aexit__(self, *_: object) -> None:
        await self.aclose()

    # ------------------------------------------------------------------
    # Observable state
    # ------------------------------------------------------------------

    @property
    def url(self) -> str:
        return self._url

    @property
    def max_failures(self) -> int:
        return self._max_failures

    @property
    def status(self) -> AgentStatus | None:
        return self._status

    @property
    def connection_state(self) -> ConnectionState:
        return self._connection

    @property
    def last_error(self) -> StatusFetchError | None:
        """Most recent failure, kept for diagnostics only."""
        return self._last_error

    @property
    def is_running(self) -> bool:
        return self._running

    def subscribe(self, listener: StatusListener) -> Callable[[], None]:
        """Call *listener* after every attempt; returns an unsubscribe callable."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Begin polling; a no-op when already running.

        Raises:
            RuntimeError: If called outside a running event loop.  The
                poller stays stopped and can be started again later.
        """
        if self._running:
            return
        asyncio.get_running_loop()
        self._running = True
        self._launch()
        self._ticker.start(self._interval_ms / 1000, self._launch)
        logger.info("Polling %s every %dms", self._url, self._interval_ms)

    def stop(self) -> None:
        """Stop scheduling attempts.  Safe to call repeatedly or before ``start()``."""
        self._ticker.cancel()
        if self._running:
            self._running = False
            logger.info("Polling of %s stopped", self._url)

    async def refresh(self) -> None:
        """Run one attempt now, outside the schedule, and wait for it."""
        await self._attempt()

    async def wait_idle(self) -> None:
        """Wait until every attempt launched so far has finished."""
        while self._inflight:
            await asyncio.gather(*self._inflight, return_exceptions=True)

    async def aclose(self) -> None:
        """Stop polling, drain outstanding attempts, and release the client."""
        self.stop()
        await self.wait_idle()
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    # ------------------------------------------------------------------
    # Fetch attempt
    # ------------------------------------------------------------------

    def _launch(self) -> None:
        if not self._running:
            return
        task = asyncio.get_running_loop().create_task(self._attempt())
        self._inflight.add(task)
        task.add_done_callback(self._inflight.discard)

    def _http(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout_s)
            self._owns_client = True
        return self._client

    async def _attempt(self) -> None:
        with _tracer.start_as_current_span("status.fetch") as span:
            span.set_attribute(ATTR_STATUS_URL, self._url)
            try:
                status = await self._fetch(span)
            except StatusFetchError as exc:
                self._record_failure(exc)
                span.set_attribute(ATTR_STATUS_OUTCOME, "failure")
            else:
                self._record_success(status)
                span.set_attribute(ATTR_STATUS_OUTCOME, "success")
            span.set_attribute(ATTR_STATUS_FAILURE_COUNT, self._connection.failure_count)
        self._notify()

    async def _fetch(self, span: trace.Span) -> AgentStatus:
        try:
            response = await self._http().get(
                self._url,
                headers={"Accept": "application/json"},
                timeout=self._timeout_s,
            )
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise StatusTransportError(self._url, str(exc) or type(exc).__name__) from exc

        span.set_attribute(ATTR_STATUS_HTTP_STATUS, response.status_code)
        if not response.is_success:
            raise StatusHTTPError(self._url, response.status_code)
        return decode_status(response.content)

    def _record_success(self, status: AgentStatus) -> None:
        self._status = status
        self._connection = self._connection.after_success(self._clock())
        self._last_error = None
        logger.debug("Status updated: busy=%s ts=%d", status.busy, status.ts)

    def _record_failure(self, exc: StatusFetchError) -> None:
        self._connection = self._connection.after_failure(self._max_failures)
        self._last_error = exc
        logger.warning(
            "Status fetch failed (%d consecutive, connected=%s): %s",
            self._connection.failure_count,
            self._connection.connected,
            exc,
        )

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self._status, self._connection)
            except Exception:
                logger.exception("Status listener %r raised", listener)
