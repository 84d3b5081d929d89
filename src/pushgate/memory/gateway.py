"""In-memory streaming gateway for tests and local development."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field

from ..apns.config import APNSConfig
from ..apns.protocol import ERROR_COMMAND, DecodedFrame, ErrorFrame, unpack_frame
from ..exceptions import GatewayConnectionError
from ..ports.connection import IGatewayConnection

logger = logging.getLogger(__name__)


@dataclass
class GatewaySession:
    """What the fake gateway saw during one connection."""

    number: int
    dead: bool = False
    closed: bool = False
    delivered: list[DecodedFrame] = field(default_factory=list)
    discarded: list[DecodedFrame] = field(default_factory=list)
    error: ErrorFrame | None = None
    buffer: bytearray = field(default_factory=bytearray)
    countdown: int = 0

    @property
    def delivered_tokens(self) -> list[str]:
        return [frame.token for frame in self.delivered]


class InMemoryGatewayConnection(IGatewayConnection):
    """
    Test double (Fake) that behaves like the legacy binary gateway.

    Args:
        rejections: Device token -> status code the gateway answers with.
        latency: Writes accepted (and silently discarded) after a rejected
            frame before its error frame becomes readable.
        dead_sessions: Number of upcoming sessions that close without a byte
            after the first write, as with a certificate mismatch.
        open_failures: Number of upcoming ``open()`` calls that fail.
        write_failures: Number of upcoming writes that fail and drop the session.
        close_failures: Number of upcoming ``close()`` calls that fail.
    """

    def __init__(
        self,
        config: APNSConfig | None = None,
        *,
        rejections: Mapping[str, int] | None = None,
        latency: int = 0,
        dead_sessions: int = 0,
        open_failures: int = 0,
        write_failures: int = 0,
        close_failures: int = 0,
    ) -> None:
        self.config = config
        self.rejections = {token.lower(): status for token, status in (rejections or {}).items()}
        self.latency = latency
        self.dead_sessions = dead_sessions
        self.open_failures = open_failures
        self.write_failures = write_failures
        self.close_failures = close_failures
        self.sessions: list[GatewaySession] = []
        self.opens = 0
        self.closes = 0

    @property
    def session(self) -> GatewaySession | None:
        return self.sessions[-1] if self.sessions else None

    @property
    def is_open(self) -> bool:
        return self.session is not None and not self.session.closed

    @property
    def delivered_tokens(self) -> list[str]:
        """Tokens the gateway accepted, across all sessions, in order."""
        return [token for session in self.sessions for token in session.delivered_tokens]

    async def open(self) -> None:
        self.opens += 1
        if self.session is not None:
            self.session.closed = True
        if self.open_failures > 0:
            self.open_failures -= 1
            raise GatewayConnectionError("Connection refused")
        session = GatewaySession(number=len(self.sessions) + 1)
        if self.dead_sessions > 0:
            self.dead_sessions -= 1
            session.dead = True
        self.sessions.append(session)
        logger.debug(f"Fake gateway session {session.number} opened (dead={session.dead})")

    async def write(self, data: bytes) -> None:
        session = self.session
        if session is None or session.closed:
            raise GatewayConnectionError("Connection is closed")
        if self.write_failures > 0:
            self.write_failures -= 1
            session.closed = True
            raise GatewayConnectionError("Broken pipe")

        frame = unpack_frame(data)
        if session.dead:
            session.discarded.append(frame)
            session.closed = True
            return
        if session.error is not None:
            session.discarded.append(frame)
            session.countdown -= 1
            if session.countdown <= 0:
                self._signal(session)
            return

        status = self.rejections.get(frame.token)
        if status is None:
            session.delivered.append(frame)
            return
        session.error = ErrorFrame(
            command=ERROR_COMMAND, status=status, identifier=frame.identifier
        )
        session.countdown = self.latency
        if session.countdown <= 0:
            self._signal(session)

    @staticmethod
    def _signal(session: GatewaySession) -> None:
        if session.error is None:
            raise RuntimeError(f"Session {session.number} has no pending error frame")
        session.buffer.extend(session.error.pack())
        session.closed = True

    async def flush(self) -> None:
        session = self.session
        if session is None:
            raise GatewayConnectionError("Connection is closed")
        if session.error is not None and not session.closed:
            self._signal(session)

    async def wait_readable(self, timeout: float | None) -> bool:
        session = self.session
        if session is None:
            raise GatewayConnectionError("Connection is closed")
        return bool(session.buffer) or session.closed

    async def read(self, size: int) -> bytes:
        session = self.session
        if session is None:
            raise GatewayConnectionError("Connection is closed")
        data = bytes(session.buffer[:size])
        del session.buffer[:size]
        return data

    async def close(self) -> None:
        self.closes += 1
        if self.session is not None:
            self.session.closed = True
        if self.close_failures > 0:
            self.close_failures -= 1
            raise GatewayConnectionError("Close failed")
