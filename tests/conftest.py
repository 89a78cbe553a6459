"""Shared fixtures: a manually driven ticker, a fake clock and HTTP fakes."""

from __future__ import annotations

import json
from typing import Any, Callable

import httpx
import pytest

Handler = Callable[[httpx.Request], httpx.Response]


class ManualTicker:
    """Ticker whose time only moves when a test calls :meth:`advance`."""

    def __init__(self) -> None:
        self.interval_ms = 0
        self.callback: Callable[[], None] | None = None
        self.elapsed_ms = 0
        self.fired = 0
        self.starts = 0

    @property
    def active(self) -> bool:
        return self.callback is not None

    def start(self, interval_s: float, callback: Callable[[], None]) -> None:
        if self.callback is not None:
            return
        self.interval_ms = round(interval_s * 1000)
        self.callback = callback
        self.elapsed_ms = 0
        self.fired = 0
        self.starts += 1

    def cancel(self) -> None:
        self.callback = None

    def advance(self, ms: int) -> None:
        """Move time forward, firing once per elapsed interval boundary."""
        self.elapsed_ms += ms
        if not self.interval_ms:
            return
        due = self.elapsed_ms // self.interval_ms
        while self.callback is not None and self.fired < due:
            self.fired += 1
            self.callback()


class FakeClock:
    """Epoch-milliseconds clock that tests set explicitly."""

    def __init__(self, now_ms: int = 1_704_067_200_000) -> None:
        self.now_ms = now_ms

    def __call__(self) -> int:
        return self.now_ms


def status_response(busy: bool = True, ts: int = 1_704_067_200_000, **extra: Any) -> httpx.Response:
    return httpx.Response(200, content=json.dumps({"busy": busy, "ts": ts, **extra}).encode())


@pytest.fixture()
def ticker() -> ManualTicker:
    return ManualTicker()


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def make_client() -> Callable[[Handler], httpx.AsyncClient]:
    """Build an ``httpx.AsyncClient`` that answers through *handler*."""

    def _make(handler: Handler) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(handler))

    return _make


@pytest.fixture()
def mock_http(monkeypatch: pytest.MonkeyPatch) -> Callable[[Handler], None]:
    """Route every ``httpx.AsyncClient`` created by the code under test through *handler*."""
    real_client = httpx.AsyncClient

    def _install(handler: Handler) -> None:
        def _factory(*args: Any, **kwargs: Any) -> httpx.AsyncClient:
            kwargs["transport"] = httpx.MockTransport(handler)
            return real_client(*args, **kwargs)

        monkeypatch.setattr(httpx, "AsyncClient", _factory)

    return _install


@pytest.fixture()
def status_handler() -> Callable[..., Handler]:
    """Handler factory answering every request with one status document."""

    def _make(busy: bool = True, ts: int = 1_704_067_200_000, **extra: Any) -> Handler:
        def _handler(request: httpx.Request) -> httpx.Response:
            return status_response(busy, ts, **extra)

        return _handler

    return _make
