"""HTTP connection to the JSON gateway using httpx."""

from __future__ import annotations

import logging

import httpx

from ..exceptions import (
    GCMAuthenticationError,
    GCMConnectionError,
    GCMError,
    GCMMalformedRequestError,
    GCMServerError,
)
from ..results import PushResults
from .config import GCMConfig
from .results import GCMResult, parse_response

logger = logging.getLogger(__name__)


class GCMConnection:
    """
    Posts one JSON request per notification.

    A custom ``transport`` can be injected (e.g. ``httpx.MockTransport``)
    for tests.
    """

    def __init__(
        self,
        config: GCMConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config
        self.transport = transport

    @property
    def headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"key={self.config.key}",
        }

    async def post(self, body: str, expected: int) -> PushResults[GCMResult]:
        """Send ``body`` and parse one result per registration id."""
        timeout = httpx.Timeout(self.config.read_timeout, connect=self.config.open_timeout)
        try:
            async with httpx.AsyncClient(timeout=timeout, transport=self.transport) as client:
                response = await client.post(self.config.url, content=body, headers=self.headers)
        except httpx.HTTPError as e:
            raise GCMConnectionError(f"{type(e).__name__}: {e}") from e

        status = response.status_code
        if status == 200:
            try:
                body = response.json()
            except ValueError as e:
                raise GCMError(f"Gateway response is not JSON: {response.text[:200]!r}") from e
            return parse_response(body, expected)
        if status == 400:
            raise GCMMalformedRequestError(response.text)
        if status == 401:
            raise GCMAuthenticationError("Sender key rejected")
        if status >= 500:
            raise GCMServerError(status, _retry_after(response))
        raise GCMConnectionError(f"Unexpected HTTP {status}: {response.text}")


def _retry_after(response: httpx.Response) -> float | None:
    value = response.headers.get("Retry-After")
    if value is None:
        return None
    try:
        return float(value)
    except ValueError:
        logger.debug(f"Ignoring non-numeric Retry-After: {value!r}")
        return None
