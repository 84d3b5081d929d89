"""Configuration for the HTTP gateway pusher."""

from __future__ import annotations

from dataclasses import dataclass

GCM_URL = "https://android.googleapis.com/gcm/send"


@dataclass(frozen=True)
class GCMConfig:
    """
    Attributes:
        key: Sender API key, sent as ``Authorization: key=<key>``.
        url: Endpoint receiving the JSON downstream messages.
        open_timeout: Seconds to wait for the connection to open.
        read_timeout: Seconds to wait for one block to be read.
        max_attempts: Attempts per notification on server/connection errors.
        retry_delay: Seconds between attempts.
        slice_quantity: Registration ids per notification (gateway limit is 1000).
    """

    key: str
    url: str = GCM_URL
    open_timeout: float = 30.0
    read_timeout: float = 30.0
    max_attempts: int = 5
    retry_delay: float = 30.0
    slice_quantity: int = 500

    def __post_init__(self) -> None:
        if not self.key:
            raise ValueError("key is required")
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        if not 1 <= self.slice_quantity <= 1000:
            raise ValueError("slice_quantity must be between 1 and 1000")
