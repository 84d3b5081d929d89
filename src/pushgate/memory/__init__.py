"""Memory adapters for testing and development."""

from __future__ import annotations

from .gateway import GatewaySession, InMemoryGatewayConnection

__all__ = ["GatewaySession", "InMemoryGatewayConnection"]
