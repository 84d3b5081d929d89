"""Streaming gateway pusher: transmission, error-frame detection and rewind."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from typing import Any

from ..exceptions import (
    GatewayConnectionError,
    GatewayHandshakeError,
    GatewayProtocolError,
    RetriesExhaustedError,
)
from ..ports.connection import IGatewayConnection
from ..retry import RetryPolicy
from .config import APNSConfig
from .connection import APNSConnection
from .notification import APNSNotification
from .protocol import ERROR_FRAME_SIZE, ErrorFrame
from .results import ResultVector, build_results

_TRANSPORT_FAILURES = (GatewayConnectionError, GatewayProtocolError, OSError)


class StreamPusher:
    """
    Sends the frames of one notification over a shared connection.

    The gateway never acknowledges a frame. Silence until the next poll is
    taken as success; an error frame names the rejected position, voids
    everything sent after it on that connection and closes the connection.
    The pusher then records the rejection, reopens, and resumes right after
    the rejected frame.
    """

    def __init__(
        self,
        connection: IGatewayConnection,
        config: APNSConfig,
        logger: logging.Logger | None = None,
    ) -> None:
        self.connection = connection
        self.config = config
        self.retry_policy = RetryPolicy(
            max_attempts=config.max_attempts,
            base_delay=config.retry_delay,
            max_delay=max(config.retry_delay, 30.0),
        )
        self._log = logger or logging.getLogger(__name__)

    async def push(self, frames: Sequence[bytes], label: str = "") -> ResultVector:
        """Transmit ``frames`` in order and return one status per frame."""
        vector = ResultVector()
        index = 0
        while index < len(frames):
            try:
                error = await self._deliver(frames, index, label)
            except GatewayHandshakeError as e:
                self._log.error(f"'{type(self).__name__}', {label}item: {index}, error: '{e}'")
                vector.fail()
                await self._restart(label)
            except RetriesExhaustedError as e:
                self._log.error(f"'{type(self).__name__}', {label}{e}, recording unknown error")
                vector.fail()
            else:
                if error is None:
                    vector.accept()
                else:
                    self._log.warning(
                        f"Gateway rejected {label}item: {error.identifier} "
                        f"with status {error.status}"
                    )
                    vector.reject(error)
                    index = error.identifier
                    await self._restart(label)
            index += 1
        return vector

    async def _deliver(self, frames: Sequence[bytes], index: int, label: str) -> ErrorFrame | None:
        """Send frame ``index``, retrying transport failures.

        Returns the error frame the gateway answered with, or ``None`` when it
        stayed silent.
        """
        is_last = index == len(frames) - 1
        attempts = 0
        while True:
            try:
                if attempts:
                    await self._reopen_if_closed()
                return await self._send_and_listen(frames[index], index, is_last)
            except _TRANSPORT_FAILURES as e:
                attempts += 1
                self._log.error(
                    f"'{type(self).__name__}', {label}attempts: {attempts}, item: {index}, "
                    f"error: '{type(e).__name__}', message: '{e}'"
                )
                if not self.retry_policy.should_retry(attempts):
                    raise RetriesExhaustedError(index, attempts) from e
                await self.retry_policy.wait_before_retry(attempts)

    async def _send_and_listen(self, frame: bytes, index: int, is_last: bool) -> ErrorFrame | None:
        connection = self.connection
        try:
            await connection.write(frame)
        except GatewayConnectionError:
            # The gateway may already have hung up after rejecting an earlier frame.
            if index == 0 or not await connection.wait_readable(0):
                raise
            packed = await connection.read(ERROR_FRAME_SIZE)
            if not packed:
                raise
            return self._parse(packed, index - 1)

        if is_last:
            await connection.flush()
            timeout: float | None = self.config.last_frame_timeout
        else:
            timeout = self.config.poll_timeout
        if not await connection.wait_readable(timeout):
            return None

        packed = await connection.read(ERROR_FRAME_SIZE)
        if not packed:
            if index == 0:
                raise GatewayHandshakeError("Connection closed before the first frame was admitted")
            raise GatewayConnectionError("Gateway closed the connection without an error frame")
        return self._parse(packed, index)

    @staticmethod
    def _parse(packed: bytes, index: int) -> ErrorFrame:
        error = ErrorFrame.parse(packed)
        if error.identifier > index:
            raise GatewayProtocolError(
                f"Error frame names item {error.identifier}, only {index + 1} sent"
            )
        return error

    async def _reopen_if_closed(self) -> None:
        if not self.connection.is_open:
            await self.connection.open()

    async def _restart(self, label: str) -> None:
        """Replace the session unconditionally.

        The gateway drops a session after an error frame even when the
        connection has not noticed the hang-up yet, so ``is_open`` cannot be
        trusted here.
        """
        try:
            await self.connection.close()
        except (GatewayConnectionError, OSError) as e:
            self._log.error(f"'{type(self).__name__}', {label}close failed: '{e}'")
        try:
            await self.connection.open()
        except GatewayConnectionError as e:
            # The next frame's retries take over reconnecting.
            self._log.error(f"'{type(self).__name__}', {label}reconnect failed: '{e}'")


class APNSPusher:
    """
    Delivers a batch of notifications over a single gateway connection.

    Each notification gets ``results`` with one status code per device and
    its ``paired_results``. Failures never escape ``push``; they are reported
    as status codes.
    """

    def __init__(
        self,
        config: APNSConfig,
        connection_factory: Callable[[APNSConfig], IGatewayConnection] = APNSConnection,
        logger: logging.Logger | None = None,
    ) -> None:
        self.config = config
        self.connection_factory = connection_factory
        self._log = logger or logging.getLogger(__name__)

    async def open_connection(self) -> IGatewayConnection:
        connection = self.connection_factory(self.config)
        try:
            await connection.open()
        except GatewayConnectionError as e:
            self._log.error(f"'{type(self).__name__}', initial connection failed: '{e}'")
        return connection

    def slice(
        self, tokens: Sequence[str], data: dict[str, Any], **kwargs: Any
    ) -> list[APNSNotification]:
        """Split ``tokens`` into notifications of ``config.slice_quantity`` devices."""
        return APNSNotification.slice(tokens, data, quantity=self.config.slice_quantity, **kwargs)

    async def push(self, notifications: Sequence[APNSNotification]) -> None:
        pages = len(notifications)
        self._log.info(f"Started - Pages: {pages}")
        connection = await self.open_connection()
        stream = StreamPusher(connection, self.config, logger=self._log)
        try:
            for page, notification in enumerate(notifications, start=1):
                self._log.info(f"Processing page: {page}/{pages}")
                label = f"page: {page}/{pages}, "
                vector = await stream.push(notification.frames(self.config), label=label)
                notification.results = build_results(vector, notification.count)
                notification.pair_results()
        finally:
            try:
                await connection.close()
            except Exception as e:  # noqa: BLE001
                self._log.error(f"Close connection {e}")
        self._log.info("Finished")
