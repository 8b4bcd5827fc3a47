"""WebSocket frame headers, masking and close payloads (RFC 6455, section 5)."""

from __future__ import annotations

import enum
from dataclasses import dataclass

CHUNK_SIZE = 1 << 15

NORMAL_CLOSURE_CODE = 1000
PROTOCOL_ERROR_CODE = 1002
NO_STATUS_CODE = 1005
ABNORMAL_CLOSE_CODE = 1006
INTERNAL_ERROR_CODE = 1011
NO_STATUS_CODE_MESSAGE = "No status code"

_NO_MASK = b"\x00\x00\x00\x00"
_LENGTH_16 = 126
_LENGTH_64 = 127


class Opcode(enum.IntEnum):
    """Frame opcodes."""

    CONTINUATION = 0x0
    TEXT_FRAME = 0x1
    BINARY_FRAME = 0x2
    CLOSE = 0x8
    PING = 0x9
    PONG = 0xA


@dataclass(frozen=True)
class FrameHeader:
    """A decoded frame header.

    ``opcode`` is an Opcode member when the value is known, otherwise the raw
    integer. ``masking_key`` is four zero bytes for unmasked frames.
    """

    fin: bool
    rsv1: bool
    opcode: int
    mask: bool
    masking_key: bytes
    header_size: int
    payload_length: int

    @property
    def frame_size(self) -> int:
        """Total number of bytes taken by the header and its payload."""
        return self.header_size + self.payload_length


def _to_opcode(value: int) -> int:
    try:
        return Opcode(value)
    except ValueError:
        return value


def parse_frame_header(buffer: bytes) -> FrameHeader | None:
    """Decode the frame header at the start of ``buffer``.

    Returns None when the buffer does not yet hold the whole header. The
    payload itself may still be incomplete; compare ``frame_size`` with the
    buffer length to know.
    """
    data = bytes(buffer[:14])
    if len(data) < 2:
        return None

    first, second = data[0], data[1]
    mask = bool(second & 0x80)
    length_code = second & 0x7F

    if length_code == _LENGTH_16:
        extra = 2
    elif length_code == _LENGTH_64:
        extra = 8
    else:
        extra = 0
    header_size = 2 + extra + (4 if mask else 0)
    if len(data) < header_size:
        return None

    if extra:
        payload_length = int.from_bytes(data[2 : 2 + extra], "big")
    else:
        payload_length = length_code

    key_start = 2 + extra
    masking_key = data[key_start : key_start + 4] if mask else _NO_MASK

    return FrameHeader(
        fin=bool(first & 0x80),
        rsv1=bool(first & 0x40),
        opcode=_to_opcode(first & 0x0F),
        mask=mask,
        masking_key=masking_key,
        header_size=header_size,
        payload_length=payload_length,
    )


def encode_frame_header(
    opcode: int,
    fin: bool,
    compress: bool,
    size: int,
    masking_key: bytes | None,
) -> bytes:
    """Encode a frame header for a payload of ``size`` bytes.

    Pass a four-byte ``masking_key`` to produce a masked frame, or None for an
    unmasked one.
    """
    if size < 0:
        raise ValueError(f"payload size cannot be negative: {size}")
    if masking_key is not None and len(masking_key) != 4:
        raise ValueError("masking key must be exactly 4 bytes")

    first = int(opcode) & 0x0F
    if fin:
        first |= 0x80
    if compress:
        first |= 0x40

    mask_bit = 0x80 if masking_key is not None else 0

    header = bytearray([first])
    if size < _LENGTH_16:
        header.append(size | mask_bit)
    elif size < 65536:
        header.append(_LENGTH_16 | mask_bit)
        header += size.to_bytes(2, "big")
    else:
        header.append(_LENGTH_64 | mask_bit)
        header += (size & 0xFFFFFFFFFFFFFFFF).to_bytes(8, "big")

    if masking_key is not None:
        header += masking_key
    return bytes(header)


def apply_mask(data: bytes, masking_key: bytes) -> bytes:
    """XOR ``data`` with the repeating four-byte key; applying it twice undoes it."""
    if len(masking_key) != 4:
        raise ValueError("masking key must be exactly 4 bytes")
    length = len(data)
    if length == 0:
        return b""
    key = (bytes(masking_key) * (length // 4 + 1))[:length]
    masked = int.from_bytes(data, "big") ^ int.from_bytes(key, "big")
    return masked.to_bytes(length, "big")


def encode_close_payload(code: int, reason: str) -> bytes:
    """Build the body of a CLOSE frame; empty when no status code is set."""
    if code == NO_STATUS_CODE:
        return b""
    return (code & 0xFFFF).to_bytes(2, "big") + reason.encode("utf-8")


def decode_close_payload(payload: bytes) -> tuple[int, str]:
    """Return the status code and reason carried by a CLOSE frame body."""
    if len(payload) < 2:
        return NO_STATUS_CODE, NO_STATUS_CODE_MESSAGE
    code = int.from_bytes(payload[:2], "big")
    reason = bytes(payload[2:]).decode("utf-8", errors="replace")
    return code, reason