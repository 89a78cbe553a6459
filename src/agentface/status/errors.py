"""Shared error types for fetching and publishing the status document."""


class StatusFetchError(Exception):
    """Base error for a failed status fetch attempt.

    Every subclass is handled identically by the poller: one more failure.
    """


class StatusTransportError(StatusFetchError):
    """The request never produced a response (DNS, TCP, TLS, timeout)."""

    def __init__(self, url: str, detail: str = "") -> None:
        self.url = url
        self.detail = detail
        super().__init__(f"Transport error fetching {url}" + (f": {detail}" if detail else ""))


class StatusHTTPError(StatusFetchError):
    """The server answered with a non-2xx status."""

    def __init__(self, url: str, status_code: int) -> None:
        self.url = url
        self.status_code = status_code
        super().__init__(f"HTTP {status_code} fetching {url}")


class StatusDecodeError(StatusFetchError):
    """The response body is not valid JSON."""

    def __init__(self, detail: str = "") -> None:
        self.detail = detail
        super().__init__("Status body is not valid JSON" + (f": {detail}" if detail else ""))


class StatusSchemaError(StatusFetchError):
    """The decoded document is missing or mistypes a required field."""

    def __init__(self, detail: str = "") -> None:
        self.detail = detail
        super().__init__("Invalid status document" + (f": {detail}" if detail else ""))


class PublishError(Exception):
    """Uploading the status document to the object store failed."""

    def __init__(self, key: str, detail: str = "") -> None:
        self.key = key
        self.detail = detail
        super().__init__(f"Failed to publish {key}" + (f": {detail}" if detail else ""))