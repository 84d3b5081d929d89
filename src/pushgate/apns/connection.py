"""TLS connection to the streaming gateway on top of asyncio transports."""

from __future__ import annotations

import asyncio
import logging
import ssl

from ..exceptions import GatewayConnectionError
from ..ports.connection import IGatewayConnection
from .config import APNSConfig

logger = logging.getLogger(__name__)


class _GatewayProtocol(asyncio.Protocol):
    """Buffers whatever the gateway sends and remembers when it hangs up."""

    def __init__(self) -> None:
        self.buffer = bytearray()
        self.closed = False
        self.error: Exception | None = None
        self._readable = asyncio.Event()
        self._writable = asyncio.Event()
        self._writable.set()

    def data_received(self, data: bytes) -> None:
        self.buffer.extend(data)
        self._readable.set()

    def eof_received(self) -> bool:
        self.closed = True
        self._readable.set()
        return False

    def connection_lost(self, exc: Exception | None) -> None:
        self.closed = True
        self.error = exc
        self._readable.set()
        self._writable.set()

    def pause_writing(self) -> None:
        self._writable.clear()

    def resume_writing(self) -> None:
        self._writable.set()

    @property
    def has_signal(self) -> bool:
        return bool(self.buffer) or self.closed

    async def wait_signal(self) -> None:
        await self.wait_more(0)

    async def wait_more(self, seen: int) -> None:
        """Wait until the buffer grows past ``seen`` bytes or the session ends."""
        while len(self.buffer) <= seen and not self.closed:
            self._readable.clear()
            await self._readable.wait()

    async def wait_writable(self) -> None:
        await self._writable.wait()


class APNSConnection(IGatewayConnection):
    """
    One TLS session at a time to the gateway.

    ``open()`` always performs a fresh handshake; the previous session, if
    any, is closed first.
    """

    def __init__(self, config: APNSConfig) -> None:
        self.config = config
        self._transport: asyncio.Transport | None = None
        self._protocol: _GatewayProtocol | None = None

    def _build_ssl_context(self) -> ssl.SSLContext | None:
        context = ssl.create_default_context(ssl.Purpose.SERVER_AUTH)
        try:
            context.load_cert_chain(self.config.certificate, password=self.config.password)
        except (OSError, ssl.SSLError) as e:
            raise GatewayConnectionError(
                f"Cannot load certificate {self.config.certificate}: {e}"
            ) from e
        return context

    @property
    def is_open(self) -> bool:
        return (
            self._transport is not None
            and self._protocol is not None
            and not self._protocol.closed
            and not self._transport.is_closing()
        )

    async def open(self) -> None:
        await self.close()
        host = self.config.gateway_host
        context = self._build_ssl_context()
        loop = asyncio.get_running_loop()
        try:
            transport, protocol = await asyncio.wait_for(
                loop.create_connection(
                    _GatewayProtocol,
                    host,
                    self.config.port,
                    ssl=context,
                    server_hostname=host if context is not None else None,
                ),
                timeout=self.config.connect_timeout,
            )
        except (OSError, ssl.SSLError, asyncio.TimeoutError) as e:
            raise GatewayConnectionError(
                f"Cannot connect to {host}:{self.config.port}: {e!r}"
            ) from e
        self._transport = transport
        self._protocol = protocol
        logger.debug(f"Connected to {host}:{self.config.port}")

    async def write(self, data: bytes) -> None:
        if not self.is_open or self._transport is None or self._protocol is None:
            raise GatewayConnectionError("Connection is closed")
        self._transport.write(data)
        await self._protocol.wait_writable()

    async def flush(self) -> None:
        if self._protocol is None:
            raise GatewayConnectionError("Connection is closed")
        await self._protocol.wait_writable()
        # A reset that still left an error frame behind is reported by read().
        if self._protocol.error is not None and not self._protocol.buffer:
            raise GatewayConnectionError(str(self._protocol.error)) from self._protocol.error

    async def wait_readable(self, timeout: float | None) -> bool:
        protocol = self._protocol
        if protocol is None:
            raise GatewayConnectionError("Connection is closed")
        if protocol.has_signal:
            return True
        if timeout is not None and timeout <= 0:
            # Let pending socket callbacks run before deciding.
            await asyncio.sleep(0)
            return protocol.has_signal
        try:
            await asyncio.wait_for(protocol.wait_signal(), timeout=timeout)
        except asyncio.TimeoutError:
            return False
        return True

    async def read(self, size: int) -> bytes:
        protocol = self._protocol
        if protocol is None:
            raise GatewayConnectionError("Connection is closed")
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self.config.read_timeout
        while len(protocol.buffer) < size and not protocol.closed:
            remaining = deadline - loop.time()
            if remaining <= 0:
                break
            try:
                await asyncio.wait_for(protocol.wait_more(len(protocol.buffer)), timeout=remaining)
            except asyncio.TimeoutError:
                break
        data = bytes(protocol.buffer[:size])
        del protocol.buffer[:size]
        return data

    async def close(self) -> None:
        transport = self._transport
        self._transport = None
        if transport is not None and not transport.is_closing():
            transport.close()
