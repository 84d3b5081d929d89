"""Per-recipient delivery results and recipient pairing."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from typing import Generic, TypeVar

from .exceptions import ResultPairingError

T = TypeVar("T")


@dataclass(frozen=True)
class PushResults(Generic[T]):
    """Immutable outcome of sending one notification to all its recipients."""

    individual_results: tuple[T, ...]
    success: int
    failed: int

    @classmethod
    def from_individual(
        cls,
        results: Iterable[T],
        is_success: Callable[[T], bool],
    ) -> PushResults[T]:
        """Build results, counting successes with ``is_success``."""
        individual = tuple(results)
        success = sum(1 for result in individual if is_success(result))
        return cls(
            individual_results=individual,
            success=success,
            failed=len(individual) - success,
        )

    def __len__(self) -> int:
        return len(self.individual_results)


def pair_results(recipients: Sequence[str], results: Sequence[T]) -> dict[str, T]:
    """Map each recipient to the result at the same position.

    Raises:
        ResultPairingError: if the two sequences differ in length.
    """
    if len(recipients) != len(results):
        raise ResultPairingError(len(recipients), len(results))
    return dict(zip(recipients, results))
