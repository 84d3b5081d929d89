"""Notification addressed to devices on the streaming gateway."""

from __future__ import annotations

import json
from collections.abc import Sequence
from typing import Any

from ..exceptions import ResultPairingError
from ..results import PushResults, pair_results
from .config import APNSConfig
from .protocol import PRIORITY_IMMEDIATE, pack_frame, token_to_bytes


class APNSNotification:
    """
    One payload for an ordered list of device tokens.

    ``frames()`` is the frame source: one frame per token, identified by its
    position, so an error frame's identifier points straight back at the
    token it rejects. ``expiration`` and ``priority`` left as ``None`` take
    the pusher's configured values.
    """

    def __init__(
        self,
        tokens: Sequence[str],
        data: dict[str, Any],
        *,
        expiration: int | None = None,
        priority: int | None = None,
    ) -> None:
        if len(set(tokens)) != len(tokens):
            raise ValueError("Device tokens must be unique within a notification")
        for token in tokens:
            token_to_bytes(token)
        self._tokens = tuple(tokens)
        self.data = data
        self.expiration = expiration
        self.priority = priority
        self._results: PushResults[int] | None = None
        self._paired_results: dict[str, int] | None = None

    def __repr__(self) -> str:
        return f"APNSNotification(count={self.count})"

    @property
    def results(self) -> PushResults[int] | None:
        return self._results

    @results.setter
    def results(self, value: PushResults[int] | None) -> None:
        self._results = value
        self._paired_results = None

    @property
    def recipients(self) -> tuple[str, ...]:
        return self._tokens

    @property
    def count(self) -> int:
        return len(self._tokens)

    @property
    def payload(self) -> bytes:
        return json.dumps(self.data, separators=(",", ":")).encode("utf-8")

    def frames(self, config: APNSConfig | None = None) -> list[bytes]:
        """Encode one frame per device; calling again restarts from frame 0."""
        expiration = self.expiration
        if expiration is None:
            expiration = config.expiration if config is not None else 0
        priority = self.priority
        if priority is None:
            priority = config.priority if config is not None else PRIORITY_IMMEDIATE
        payload = self.payload
        return [
            pack_frame(token, payload, index, expiration, priority)
            for index, token in enumerate(self._tokens)
        ]

    @property
    def success(self) -> int:
        return self._require_results().success

    @property
    def failed(self) -> int:
        return self._require_results().failed

    @property
    def individual_results(self) -> tuple[int, ...]:
        return self._require_results().individual_results

    def pair_results(self) -> dict[str, int]:
        """Map every device token to its status code (computed once)."""
        if self._paired_results is None:
            self._paired_results = pair_results(self._tokens, self.individual_results)
        return self._paired_results

    @property
    def paired_results(self) -> dict[str, int] | None:
        return self._paired_results

    def _require_results(self) -> PushResults[int]:
        if self.results is None:
            raise ResultPairingError(self.count, 0)
        return self.results

    @classmethod
    def slice(
        cls,
        tokens: Sequence[str],
        data: dict[str, Any],
        quantity: int = 5000,
        **kwargs: Any,
    ) -> list[APNSNotification]:
        """Split a large audience into notifications of at most ``quantity`` devices."""
        return [
            cls(tokens[i : i + quantity], data, **kwargs)
            for i in range(0, len(tokens), quantity)
        ]
