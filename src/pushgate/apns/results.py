"""Status codes and result bookkeeping for the streaming gateway."""

from __future__ import annotations

from collections.abc import Iterator
from enum import IntEnum

from ..results import PushResults
from .protocol import ErrorFrame


class APNSStatus(IntEnum):
    """Status codes reported per device.

    Everything except NO_ERROR and UNKNOWN comes verbatim from error frames;
    codes the gateway adds later are passed through as plain ints.
    """

    NO_ERROR = 0
    PROCESSING_ERROR = 1
    MISSING_DEVICE_TOKEN = 2
    MISSING_TOPIC = 3
    MISSING_PAYLOAD = 4
    INVALID_TOKEN_SIZE = 5
    INVALID_TOPIC_SIZE = 6
    INVALID_PAYLOAD_SIZE = 7
    INVALID_TOKEN = 8
    SHUTDOWN = 10
    PROTOCOL_ERROR = 128
    UNKNOWN = 255


NO_ERROR_STATUS_CODE = APNSStatus.NO_ERROR.value
UNKNOWN_ERROR_STATUS_CODE = APNSStatus.UNKNOWN.value


class ResultVector:
    """
    Index-aligned status codes for one notification, built frame by frame.

    Successes are speculative: the gateway never confirms them, so a later
    error frame truncates every entry from the rejected position onwards.
    """

    def __init__(self) -> None:
        self._codes: list[int] = []

    def __len__(self) -> int:
        return len(self._codes)

    def __iter__(self) -> Iterator[int]:
        return iter(self._codes)

    def __getitem__(self, index: int) -> int:
        return self._codes[index]

    def accept(self) -> None:
        """Presume the next frame delivered (no rejection was signalled)."""
        self._codes.append(NO_ERROR_STATUS_CODE)

    def fail(self, status: int = UNKNOWN_ERROR_STATUS_CODE) -> None:
        """Record a frame that could not be delivered for a local reason."""
        self._codes.append(status)

    def reject(self, error: ErrorFrame) -> None:
        """Apply an error frame: drop speculative entries and record its status."""
        del self._codes[error.identifier :]
        self._codes.append(error.status)

    def fit(self, count: int) -> tuple[int, ...]:
        """Return exactly ``count`` codes, padding any shortfall with UNKNOWN."""
        codes = self._codes[:count]
        codes.extend([UNKNOWN_ERROR_STATUS_CODE] * (count - len(codes)))
        return tuple(codes)


def is_delivered(status: int) -> bool:
    return status == NO_ERROR_STATUS_CODE


def build_results(vector: ResultVector, count: int) -> PushResults[int]:
    """Freeze a result vector into per-device results of length ``count``."""
    return PushResults.from_individual(vector.fit(count), is_delivered)
