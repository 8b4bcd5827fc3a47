import pytest

from ixws.frames import (
    NO_STATUS_CODE,
    NORMAL_CLOSURE_CODE,
    Opcode,
    apply_mask,
    decode_close_payload,
    encode_close_payload,
    encode_frame_header,
    parse_frame_header,
)

KEY = b"\x37\xfa\x21\x3d"


def test_unmasked_text_header_wire_bytes():
    header = encode_frame_header(Opcode.TEXT_FRAME, True, False, 5, None)
    assert header == b"\x81\x05"


def test_mask_worked_example():
    assert apply_mask(b"Hello", KEY) == b"\x7f\x9f\x4d\x51\x58"


def test_mask_round_trip():
    data = bytes(range(256)) * 3 + b"tail"
    assert apply_mask(apply_mask(data, KEY), KEY) == data


def test_mask_empty():
    assert apply_mask(b"", KEY) == b""


def test_mask_bad_key():
    with pytest.raises(ValueError):
        apply_mask(b"abc", b"\x01\x02")


@pytest.mark.parametrize("size", [0, 5, 125, 126, 65535, 65536, 1 << 20])
@pytest.mark.parametrize("key", [None, KEY])
def test_header_round_trip(size, key):
    header = encode_frame_header(Opcode.BINARY_FRAME, False, True, size, key)
    parsed = parse_frame_header(header)
    assert parsed is not None
    assert parsed.payload_length == size
    assert parsed.header_size == len(header)
    assert parsed.opcode == Opcode.BINARY_FRAME
    assert parsed.fin is False
    assert parsed.rsv1 is True
    assert parsed.mask is (key is not None)
    if key is not None:
        assert parsed.masking_key == key
    assert parsed.frame_size == len(header) + size


def test_extended_length_markers():
    assert encode_frame_header(Opcode.TEXT_FRAME, True, False, 126, None)[1] == 126
    assert encode_frame_header(Opcode.TEXT_FRAME, True, False, 65536, None)[1] == 127


def test_parse_incomplete_header():
    assert parse_frame_header(b"\x81") is None
    header = encode_frame_header(Opcode.TEXT_FRAME, True, False, 200, KEY)
    assert parse_frame_header(header[:-1]) is None


def test_parse_with_payload_following():
    payload = b"payload"
    frame = encode_frame_header(Opcode.PING, True, False, len(payload), KEY)
    frame += apply_mask(payload, KEY)
    parsed = parse_frame_header(frame)
    assert parsed.opcode == Opcode.PING
    body = frame[parsed.header_size : parsed.frame_size]
    assert apply_mask(body, parsed.masking_key) == payload


def test_parse_unknown_opcode_kept_raw():
    parsed = parse_frame_header(b"\x83\x00")
    assert parsed.opcode == 3
    assert parsed.fin is True


def test_encode_rejects_bad_arguments():
    with pytest.raises(ValueError):
        encode_frame_header(Opcode.TEXT_FRAME, True, False, -1, None)
    with pytest.raises(ValueError):
        encode_frame_header(Opcode.TEXT_FRAME, True, False, 3, b"\x00")


def test_close_payload_round_trip():
    body = encode_close_payload(NORMAL_CLOSURE_CODE, "bye")
    assert body[:2] == NORMAL_CLOSURE_CODE.to_bytes(2, "big")
    assert decode_close_payload(body) == (NORMAL_CLOSURE_CODE, "bye")


def test_close_payload_without_status():
    assert encode_close_payload(NO_STATUS_CODE, "ignored") == b""
    assert decode_close_payload(b"")[0] == NO_STATUS_CODE
    assert decode_close_payload(b"\x03")[0] == NO_STATUS_CODE


def test_close_payload_code_only():
    assert decode_close_payload(encode_close_payload(4000, "")) == (4000, "")