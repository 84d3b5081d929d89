"""HTTP gateway pusher: one request per notification, bounded retry."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

import httpx

from ..exceptions import GCMConnectionError, GCMError, GCMServerError
from ..results import PushResults
from ..retry import RetryPolicy
from .config import GCMConfig
from .connection import GCMConnection
from .notification import GCMNotification
from .results import GCMResult

_RETRYABLE = (GCMServerError, GCMConnectionError)


class GCMPusher:
    """
    Sends each notification as a single JSON request.

    Server and connection errors are retried with backoff; authentication
    and malformed-request errors fail the notification straight away. A
    notification that cannot be sent gets one failed result per
    registration id and the batch moves on.
    """

    def __init__(
        self,
        config: GCMConfig,
        transport: httpx.AsyncBaseTransport | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.config = config
        self.connection = GCMConnection(config, transport=transport)
        self.retry_policy = RetryPolicy(
            max_attempts=config.max_attempts,
            base_delay=config.retry_delay,
            max_delay=config.retry_delay,
        )
        self._log = logger or logging.getLogger(__name__)

    def slice(self, registration_ids: Sequence[str], data: dict[str, Any]) -> list[GCMNotification]:
        return GCMNotification.slice(registration_ids, data, quantity=self.config.slice_quantity)

    async def push(self, notifications: Sequence[GCMNotification]) -> None:
        pages = len(notifications)
        self._log.info(f"Started - Pages: {pages}")
        for page, notification in enumerate(notifications, start=1):
            self._log.info(f"Processing page: {page}/{pages}")
            notification.results = await self._send(notification, page, pages)
            notification.pair_results()
            self._log.info(f"Finished page: {page}/{pages}")

    async def _send(
        self, notification: GCMNotification, page: int, pages: int
    ) -> PushResults[GCMResult]:
        attempts = 0
        while True:
            try:
                return await self.connection.post(notification.as_gcm_json(), notification.count)
            except GCMError as e:
                attempts += 1
                self._log.error(
                    f"'{type(self).__name__}', page: {page}/{pages}, attempts: {attempts}, "
                    f"error: '{type(e).__name__}', message: '{e}'"
                )
                if not isinstance(e, _RETRYABLE) or not self.retry_policy.should_retry(attempts):
                    return PushResults.from_individual(
                        [GCMResult.failure(type(e).__name__)] * notification.count,
                        lambda result: result.ok,
                    )
                retry_after = e.retry_after if isinstance(e, GCMServerError) else None
                await self.retry_policy.wait_before_retry(attempts, minimum=retry_after)
