"""StatusPublisher — uploads the status document to an object store."""

from __future__ import annotations

import logging
import time

import httpx

from agentface.status.errors import PublishError
from agentface.status.models import AgentStatus, serialize_status
from agentface.utils.telemetry import ATTR_PUBLISH_BUSY, ATTR_PUBLISH_KEY, get_tracer

logger = logging.getLogger(__name__)
_tracer = get_tracer(__name__)

DEFAULT_KEY = "status.json"
DEFAULT_TIMEOUT_S = 5.0

_UPLOAD_HEADERS = {
    "Content-Type": "application/json",
    "Cache-Control": "no-cache",
}


class StatusPublisher:
    """PUTs serialized :class:`AgentStatus` documents to ``<upload_url>/<key>``.

    *upload_url* is any endpoint that accepts an HTTP ``PUT`` of the object
    body: a pre-signed bucket prefix, a public-write bucket behind a proxy,
    or a local test server.  Extra *headers* (e.g. an authorization token)
    are sent with every upload.

    Usage::

        async with StatusPublisher("https://bucket.example.com/openclaw-status/default") as pub:
            await pub.publish(AgentStatus(busy=True, ts=now_ms))
    """

    def __init__(
        self,
        upload_url: str,
        *,
        key: str = DEFAULT_KEY,
        client: httpx.AsyncClient | None = None,
        timeout_s: float = DEFAULT_TIMEOUT_S,
        headers: dict[str, str] | None = None,
    ) -> None:
        self._upload_url = upload_url.rstrip("/")
        self._key = key.lstrip("/")
        self._client = client
        self._owns_client = client is None
        self._timeout_s = timeout_s
        self._headers = {**(headers or {}), **_UPLOAD_HEADERS}

    async def __aenter__(self) -> StatusPublisher:
        return self

    async def __aexit__(self, *_: object) -> None:
        await self.aclose()

    @property
    def key(self) -> str:
        return self._key

    @property
    def target_url(self) -> str:
        return f"{self._upload_url}/{self._key}"

    def _http(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout_s)
            self._owns_client = True
        return self._client

    async def aclose(self) -> None:
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    async def publish(self, status: AgentStatus) -> str:
        """Upload *status*; returns the JSON body that was written.

        Raises:
            PublishError: If the request fails or the store rejects it.
        """
        body = serialize_status(status)
        started = time.monotonic()
        with _tracer.start_as_current_span("status.publish") as span:
            span.set_attribute(ATTR_PUBLISH_KEY, self._key)
            span.set_attribute(ATTR_PUBLISH_BUSY, status.busy)
            try:
                response = await self._http().put(
                    self.target_url,
                    content=body.encode("utf-8"),
                    headers=self._headers,
                    timeout=self._timeout_s,
                )
            except (httpx.HTTPError, httpx.InvalidURL) as exc:
                raise PublishError(self._key, str(exc) or type(exc).__name__) from exc
            if not response.is_success:
                raise PublishError(self._key, f"HTTP {response.status_code}")

        logger.info(
            "Published %s (busy=%s) in %.0fms",
            self._key,
            status.busy,
            (time.monotonic() - started) * 1000,
        )
        return body

    async def publish_safely(self, status: AgentStatus) -> bool:
        """Like :meth:`publish` but never raises; returns whether it succeeded."""
        try:
            await self.publish(status)
        except PublishError as exc:
            logger.error("Upload failed, continuing: %s", exc)
            return False
        return True
