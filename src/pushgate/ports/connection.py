"""Gateway connection port."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class IGatewayConnection(Protocol):
    """
    Duplex byte stream to a streaming push gateway.

    Implementations: APNSConnection (TLS), InMemoryGatewayConnection (tests).
    Transport failures surface as GatewayConnectionError.
    """

    @property
    def is_open(self) -> bool:
        """Whether the current session can still be written to."""
        ...

    async def open(self) -> None:
        """Start a fresh session, discarding any previous one."""
        ...

    async def write(self, data: bytes) -> None:
        """Queue bytes for the gateway."""
        ...

    async def flush(self) -> None:
        """Wait until queued bytes have been handed to the network."""
        ...

    async def wait_readable(self, timeout: float | None) -> bool:
        """Return True once bytes or end-of-stream are available to read.

        ``timeout=0`` checks without blocking; ``None`` waits indefinitely.
        """
        ...

    async def read(self, size: int) -> bytes:
        """Read up to ``size`` bytes; an empty result means end-of-stream."""
        ...

    async def close(self) -> None:
        """Close the current session."""
        ...
