"""Port definitions for push delivery."""

from __future__ import annotations

from .connection import IGatewayConnection
from .notification import INotification
from .pusher import IPusher

__all__ = [
    "IGatewayConnection",
    "INotification",
    "IPusher",
]
