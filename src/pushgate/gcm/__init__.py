"""JSON/HTTP gateway: notification, connection, pusher."""

from __future__ import annotations

from .config import GCMConfig
from .connection import GCMConnection
from .notification import GCMNotification
from .pusher import GCMPusher
from .results import GCMResult

__all__ = [
    "GCMConfig",
    "GCMConnection",
    "GCMNotification",
    "GCMPusher",
    "GCMResult",
]
