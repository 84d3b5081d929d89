"""Notification port shared by all pushers."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol, runtime_checkable

from ..results import PushResults


@runtime_checkable
class INotification(Protocol):
    """A payload addressed to an ordered list of recipients.

    Pushers attach ``results`` once delivery finishes; ``pair_results`` then
    maps every recipient to its individual outcome.
    """

    results: PushResults[Any] | None

    @property
    def recipients(self) -> Sequence[str]:
        """Recipient identifiers in delivery order."""
        ...

    @property
    def count(self) -> int:
        """Number of recipients."""
        ...

    def pair_results(self) -> dict[str, Any]:
        """Recipient to individual result mapping."""
        ...
