"""Streaming binary gateway: frames, connection, pusher."""

from __future__ import annotations

from .config import APNSConfig
from .connection import APNSConnection
from .notification import APNSNotification
from .protocol import ErrorFrame, pack_frame, unpack_frame
from .pusher import APNSPusher, StreamPusher
from .results import (
    NO_ERROR_STATUS_CODE,
    UNKNOWN_ERROR_STATUS_CODE,
    APNSStatus,
    ResultVector,
)

__all__ = [
    "APNSConfig",
    "APNSConnection",
    "APNSNotification",
    "APNSPusher",
    "APNSStatus",
    "ErrorFrame",
    "NO_ERROR_STATUS_CODE",
    "ResultVector",
    "StreamPusher",
    "UNKNOWN_ERROR_STATUS_CODE",
    "pack_frame",
    "unpack_frame",
]
