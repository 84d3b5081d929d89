"""Per-registration results returned by the HTTP gateway."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..exceptions import GCMError
from ..results import PushResults


@dataclass(frozen=True)
class GCMResult:
    """Outcome for a single registration id.

    ``registration_id`` is set when the gateway reports a canonical id that
    should replace the one used.
    """

    message_id: str | None = None
    registration_id: str | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def failure(cls, error: str) -> GCMResult:
        return cls(error=error)


def parse_response(body: Any, expected: int) -> PushResults[GCMResult]:
    """Build results from a 200 response body."""
    raw = body.get("results") if isinstance(body, dict) else None
    if not isinstance(raw, list) or len(raw) != expected:
        raise GCMError(
            f"Expected {expected} results in gateway response, got {body!r}"
        )
    if not all(isinstance(item, dict) for item in raw):
        raise GCMError(f"Malformed result entries in gateway response: {raw!r}")
    individual = [
        GCMResult(
            message_id=item.get("message_id"),
            registration_id=item.get("registration_id"),
            error=item.get("error"),
        )
        for item in raw
    ]
    return PushResults.from_individual(individual, lambda result: result.ok)
