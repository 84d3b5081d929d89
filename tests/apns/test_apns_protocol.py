"""Tests for the binary frame and error frame codecs."""

import struct

import pytest

from pushgate.apns.protocol import (
    ERROR_COMMAND,
    PRIORITY_CONSERVE_POWER,
    SEND_COMMAND,
    ErrorFrame,
    pack_frame,
    token_to_bytes,
    unpack_frame,
)
from pushgate.exceptions import GatewayProtocolError, InvalidDeviceTokenError

TOKEN = "ab" * 32


def test_pack_frame_layout():
    frame = pack_frame(TOKEN, b'{"aps":{}}', identifier=3)

    command, length = struct.unpack(">BI", frame[:5])
    assert command == SEND_COMMAND
    assert length == len(frame) - 5
    # First item is the 32-byte device token
    assert frame[5:8] == struct.pack(">BH", 1, 32)
    assert frame[8:40] == bytes.fromhex(TOKEN)
    # Then the payload
    assert frame[40:43] == struct.pack(">BH", 2, 10)
    assert frame[43:53] == b'{"aps":{}}'


def test_unpack_frame_reads_back_all_items():
    frame = pack_frame(TOKEN, b"{}", identifier=42, expiration=1700000000, priority=5)

    decoded = unpack_frame(frame)

    assert decoded.token == TOKEN
    assert decoded.payload == b"{}"
    assert decoded.identifier == 42
    assert decoded.expiration == 1700000000
    assert decoded.priority == PRIORITY_CONSERVE_POWER


def test_unpack_frame_rejects_other_commands():
    frame = bytearray(pack_frame(TOKEN, b"{}", identifier=0))
    frame[0] = 1

    with pytest.raises(GatewayProtocolError, match="Unexpected command"):
        unpack_frame(bytes(frame))


def test_unpack_frame_rejects_truncated_frame():
    frame = pack_frame(TOKEN, b"{}", identifier=0)

    with pytest.raises(GatewayProtocolError, match="does not match"):
        unpack_frame(frame[:-2])


def test_token_to_bytes_accepts_angle_bracket_notation():
    spaced = "<" + " ".join(TOKEN[i : i + 8] for i in range(0, 64, 8)) + ">"

    assert token_to_bytes(spaced) == bytes.fromhex(TOKEN)


@pytest.mark.parametrize("token", ["zz" * 32, "ab" * 31, ""])
def test_token_to_bytes_rejects_bad_tokens(token):
    with pytest.raises(InvalidDeviceTokenError):
        token_to_bytes(token)


def test_error_frame_parse():
    error = ErrorFrame.parse(bytes([8, 7, 0, 0, 0, 2]))

    assert error == ErrorFrame(command=ERROR_COMMAND, status=7, identifier=2)


def test_error_frame_identifier_is_big_endian_unsigned():
    error = ErrorFrame.parse(bytes([8, 255, 0xFF, 0xFF, 0xFF, 0xFE]))

    assert error.status == 255
    assert error.identifier == 0xFFFFFFFE


def test_error_frame_pack_round_trip():
    error = ErrorFrame(command=8, status=8, identifier=1234)

    assert ErrorFrame.parse(error.pack()) == error


@pytest.mark.parametrize("packed", [b"", b"\x08\x07", b"\x08\x07\x00\x00\x00\x02\x00"])
def test_error_frame_rejects_wrong_size(packed):
    with pytest.raises(GatewayProtocolError, match="6-byte"):
        ErrorFrame.parse(packed)
