"""Batched push delivery over streaming binary and JSON/HTTP gateways."""

from __future__ import annotations

from .apns import (
    NO_ERROR_STATUS_CODE,
    UNKNOWN_ERROR_STATUS_CODE,
    APNSConfig,
    APNSConnection,
    APNSNotification,
    APNSPusher,
    APNSStatus,
    ErrorFrame,
    ResultVector,
    StreamPusher,
)
from .exceptions import (
    GatewayConnectionError,
    GatewayError,
    GatewayHandshakeError,
    GatewayProtocolError,
    GCMAuthenticationError,
    GCMConnectionError,
    GCMError,
    GCMMalformedRequestError,
    GCMServerError,
    InvalidDeviceTokenError,
    PushError,
    ResultPairingError,
    RetriesExhaustedError,
)
from .gcm import GCMConfig, GCMConnection, GCMNotification, GCMPusher, GCMResult
from .memory import InMemoryGatewayConnection
from .ports import IGatewayConnection, INotification, IPusher
from .results import PushResults, pair_results
from .retry import RetryPolicy

__all__ = [
    "APNSConfig",
    "APNSConnection",
    "APNSNotification",
    "APNSPusher",
    "APNSStatus",
    "ErrorFrame",
    "GCMAuthenticationError",
    "GCMConfig",
    "GCMConnection",
    "GCMConnectionError",
    "GCMError",
    "GCMMalformedRequestError",
    "GCMNotification",
    "GCMPusher",
    "GCMResult",
    "GCMServerError",
    "GatewayConnectionError",
    "GatewayError",
    "GatewayHandshakeError",
    "GatewayProtocolError",
    "IGatewayConnection",
    "INotification",
    "IPusher",
    "InMemoryGatewayConnection",
    "InvalidDeviceTokenError",
    "NO_ERROR_STATUS_CODE",
    "PushError",
    "PushResults",
    "ResultPairingError",
    "ResultVector",
    "RetriesExhaustedError",
    "RetryPolicy",
    "StreamPusher",
    "UNKNOWN_ERROR_STATUS_CODE",
    "pair_results",
]
