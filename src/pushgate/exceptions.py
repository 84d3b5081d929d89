"""Exception hierarchy for push delivery."""

from __future__ import annotations


class PushError(Exception):
    """Root exception for the entire pushgate package."""


class GatewayError(PushError):
    """Base class for failures talking to a streaming push gateway."""


class GatewayConnectionError(GatewayError):
    """Raised when opening, writing to or reading from the gateway fails."""


class GatewayProtocolError(GatewayError):
    """Raised when the gateway sends bytes that do not form a valid error frame."""


class GatewayHandshakeError(GatewayError):
    """Raised when the gateway closes a fresh session before admitting any frame.

    Typically caused by a certificate/environment mismatch (production
    certificate against the sandbox gateway or vice versa).
    """


class RetriesExhaustedError(GatewayError):
    """Raised when a frame failed on every allowed attempt."""

    def __init__(self, item: int, attempts: int) -> None:
        self.item = item
        self.attempts = attempts
        super().__init__(f"Item {item} failed after {attempts} attempts")


class InvalidDeviceTokenError(PushError, ValueError):
    """Raised when a device token is not a 32-byte hex string."""

    def __init__(self, token: str) -> None:
        self.token = token
        super().__init__(f"Invalid device token {token!r}: expected 64 hex characters")


class ResultPairingError(PushError):
    """Raised when recipients and individual results cannot be paired."""

    def __init__(self, recipients: int, results: int) -> None:
        self.recipients = recipients
        self.results = results
        super().__init__(f"Cannot pair {recipients} recipients with {results} results")


class GCMError(PushError):
    """Base class for HTTP gateway failures."""


class GCMConnectionError(GCMError):
    """Raised when the HTTP request could not be completed."""


class GCMServerError(GCMError):
    """Raised on a 5xx answer; the request may be retried."""

    def __init__(self, status_code: int, retry_after: float | None = None) -> None:
        self.status_code = status_code
        self.retry_after = retry_after
        super().__init__(f"Gateway internal error (HTTP {status_code})")


class GCMAuthenticationError(GCMError):
    """Raised on a 401 answer: the sender key was rejected."""


class GCMMalformedRequestError(GCMError):
    """Raised on a 400 answer: the JSON body could not be parsed."""
