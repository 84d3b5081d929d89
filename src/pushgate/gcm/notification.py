"""Notification addressed to registration ids on the HTTP gateway."""

from __future__ import annotations

import json
from collections.abc import Sequence
from typing import Any

from ..exceptions import ResultPairingError
from ..results import PushResults, pair_results
from .results import GCMResult


class GCMNotification:
    """Payload for up to 1000 registration ids, sent as one JSON request."""

    def __init__(self, registration_ids: Sequence[str], data: dict[str, Any]) -> None:
        if len(set(registration_ids)) != len(registration_ids):
            raise ValueError("Registration ids must be unique within a notification")
        self._registration_ids = tuple(registration_ids)
        self.data = data
        self._results: PushResults[GCMResult] | None = None
        self._paired_results: dict[str, GCMResult] | None = None

    def __repr__(self) -> str:
        return f"GCMNotification(count={self.count})"

    @property
    def results(self) -> PushResults[GCMResult] | None:
        return self._results

    @results.setter
    def results(self, value: PushResults[GCMResult] | None) -> None:
        self._results = value
        self._paired_results = None

    @property
    def recipients(self) -> tuple[str, ...]:
        return self._registration_ids

    @property
    def count(self) -> int:
        return len(self._registration_ids)

    def as_gcm_json(self) -> str:
        return json.dumps({"registration_ids": list(self._registration_ids), "data": self.data})

    @property
    def individual_results(self) -> tuple[GCMResult, ...]:
        if self.results is None:
            raise ResultPairingError(self.count, 0)
        return self.results.individual_results

    @property
    def success(self) -> int:
        return sum(1 for result in self.individual_results if result.ok)

    @property
    def failed(self) -> int:
        return self.count - self.success

    def pair_results(self) -> dict[str, GCMResult]:
        if self._paired_results is None:
            self._paired_results = pair_results(self._registration_ids, self.individual_results)
        return self._paired_results

    @property
    def paired_results(self) -> dict[str, GCMResult] | None:
        return self._paired_results

    @classmethod
    def slice(
        cls,
        registration_ids: Sequence[str],
        data: dict[str, Any],
        quantity: int = 500,
    ) -> list[GCMNotification]:
        return [
            cls(registration_ids[i : i + quantity], data)
            for i in range(0, len(registration_ids), quantity)
        ]
