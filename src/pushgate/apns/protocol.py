"""Wire format of the legacy binary gateway protocol.

Outbound, every (notification, device) pair is one command-2 frame::

    u8 command (2) | u32 frame length | item*
    item := u8 item id | u16 item length | item data

Inbound, the gateway only ever speaks on failure, with a 6-byte error frame::

    u8 command (8) | u8 status | u32 identifier

after which it closes the connection.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass

from ..exceptions import GatewayProtocolError, InvalidDeviceTokenError

SEND_COMMAND = 2
ERROR_COMMAND = 8

ERROR_FRAME_SIZE = 6
DEVICE_TOKEN_SIZE = 32

DEVICE_TOKEN_ITEM = 1
PAYLOAD_ITEM = 2
IDENTIFIER_ITEM = 3
EXPIRATION_ITEM = 4
PRIORITY_ITEM = 5

PRIORITY_IMMEDIATE = 10
PRIORITY_CONSERVE_POWER = 5

_FRAME_HEADER = struct.Struct(">BI")
_ITEM_HEADER = struct.Struct(">BH")
_ERROR_FRAME = struct.Struct(">BBI")


def token_to_bytes(token: str) -> bytes:
    """Decode a hex device token, tolerating the ``<ab12 cd34>`` notation."""
    cleaned = token.strip().strip("<>").replace(" ", "")
    try:
        raw = bytes.fromhex(cleaned)
    except ValueError as e:
        raise InvalidDeviceTokenError(token) from e
    if len(raw) != DEVICE_TOKEN_SIZE:
        raise InvalidDeviceTokenError(token)
    return raw


def _item(item_id: int, data: bytes) -> bytes:
    return _ITEM_HEADER.pack(item_id, len(data)) + data


def pack_frame(
    token: str,
    payload: bytes,
    identifier: int,
    expiration: int = 0,
    priority: int = PRIORITY_IMMEDIATE,
) -> bytes:
    """Encode one notification for one device as a command-2 frame."""
    items = b"".join(
        (
            _item(DEVICE_TOKEN_ITEM, token_to_bytes(token)),
            _item(PAYLOAD_ITEM, payload),
            _item(IDENTIFIER_ITEM, struct.pack(">I", identifier)),
            _item(EXPIRATION_ITEM, struct.pack(">I", expiration)),
            _item(PRIORITY_ITEM, struct.pack(">B", priority)),
        )
    )
    return _FRAME_HEADER.pack(SEND_COMMAND, len(items)) + items


@dataclass(frozen=True)
class DecodedFrame:
    """Fields of a command-2 frame, as seen by the gateway."""

    token: str
    payload: bytes
    identifier: int
    expiration: int
    priority: int


def unpack_frame(frame: bytes) -> DecodedFrame:
    """Decode a single command-2 frame produced by :func:`pack_frame`."""
    if len(frame) < _FRAME_HEADER.size:
        raise GatewayProtocolError(f"Frame too short: {len(frame)} bytes")
    command, length = _FRAME_HEADER.unpack_from(frame)
    if command != SEND_COMMAND:
        raise GatewayProtocolError(f"Unexpected command {command}")
    body = frame[_FRAME_HEADER.size :]
    if len(body) != length:
        raise GatewayProtocolError(f"Frame length {length} does not match body {len(body)}")

    items: dict[int, bytes] = {}
    offset = 0
    while offset < len(body):
        item_id, item_length = _ITEM_HEADER.unpack_from(body, offset)
        offset += _ITEM_HEADER.size
        items[item_id] = body[offset : offset + item_length]
        offset += item_length
    if IDENTIFIER_ITEM not in items:
        raise GatewayProtocolError("Frame carries no notification identifier")

    return DecodedFrame(
        token=items.get(DEVICE_TOKEN_ITEM, b"").hex(),
        payload=items.get(PAYLOAD_ITEM, b""),
        identifier=struct.unpack(">I", items[IDENTIFIER_ITEM])[0],
        expiration=struct.unpack(">I", items[EXPIRATION_ITEM])[0]
        if EXPIRATION_ITEM in items
        else 0,
        priority=items[PRIORITY_ITEM][0] if PRIORITY_ITEM in items else PRIORITY_IMMEDIATE,
    )


@dataclass(frozen=True)
class ErrorFrame:
    """Rejection notice sent by the gateway right before it hangs up."""

    command: int
    status: int
    identifier: int

    @classmethod
    def parse(cls, packed: bytes) -> ErrorFrame:
        if len(packed) != ERROR_FRAME_SIZE:
            raise GatewayProtocolError(
                f"Expected a {ERROR_FRAME_SIZE}-byte error frame, got {len(packed)} bytes"
            )
        command, status, identifier = _ERROR_FRAME.unpack(packed)
        return cls(command=command, status=status, identifier=identifier)

    def pack(self) -> bytes:
        return _ERROR_FRAME.pack(self.command, self.status, self.identifier)
