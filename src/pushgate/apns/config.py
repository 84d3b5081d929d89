"""Configuration for the streaming gateway pusher."""

from __future__ import annotations

from dataclasses import dataclass

from .protocol import PRIORITY_CONSERVE_POWER, PRIORITY_IMMEDIATE

PRODUCTION_HOST = "gateway.push.apple.com"
SANDBOX_HOST = "gateway.sandbox.push.apple.com"
GATEWAY_PORT = 2195


@dataclass(frozen=True)
class APNSConfig:
    """Connection and delivery settings.

    Attributes:
        certificate: Path to the PEM file holding the client certificate and key.
        sandbox: Talk to the sandbox gateway instead of production.
        password: Passphrase of the private key, if encrypted.
        host: Override the gateway host (defaults from ``sandbox``).
        port: Gateway port.
        connect_timeout: Seconds to wait for the TLS session to open.
        read_timeout: Seconds to wait for a complete error frame once readable.
        poll_timeout: Seconds to wait for a rejection after an interior frame;
            0 checks without blocking.
        last_frame_timeout: Seconds to wait for a late rejection after the last
            frame of a notification.
        max_attempts: Attempts per frame before it is recorded as unknown error.
        retry_delay: Seconds to back off between attempts (doubling, capped at 30).
        slice_quantity: Devices per notification when slicing large audiences.
        expiration: Epoch seconds after which the gateway drops the message; 0 = now.
        priority: 10 delivers immediately, 5 at a power-considerate time.
    """

    certificate: str
    sandbox: bool = False
    password: str | None = None
    host: str | None = None
    port: int = GATEWAY_PORT
    connect_timeout: float = 30.0
    read_timeout: float = 5.0
    poll_timeout: float = 0.0
    last_frame_timeout: float = 2.0
    max_attempts: int = 5
    retry_delay: float = 0.0
    slice_quantity: int = 5000
    expiration: int = 0
    priority: int = PRIORITY_IMMEDIATE

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        if self.slice_quantity < 1:
            raise ValueError("slice_quantity must be >= 1")
        if self.priority not in (PRIORITY_IMMEDIATE, PRIORITY_CONSERVE_POWER):
            raise ValueError(f"priority must be 10 or 5, got {self.priority}")
        for name in ("connect_timeout", "read_timeout", "poll_timeout", "last_frame_timeout"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be >= 0")

    @property
    def gateway_host(self) -> str:
        if self.host:
            return self.host
        return SANDBOX_HOST if self.sandbox else PRODUCTION_HOST
