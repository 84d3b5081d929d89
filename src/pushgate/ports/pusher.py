"""Pusher port."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from .notification import INotification


@runtime_checkable
class IPusher(Protocol):
    """Delivers a batch of notifications and attaches results to each one."""

    async def push(self, notifications: Sequence[INotification]) -> None:
        """Send every notification; failures are reported through results."""
        ...
