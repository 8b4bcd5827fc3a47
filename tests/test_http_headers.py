import io

import pytest

from ixws.http_headers import HeaderParseError, HttpHeaders, parse_http_headers


def test_lookup_ignores_case():
    headers = HttpHeaders({"Content-Type": "text/plain"})
    assert headers["content-type"] == "text/plain"
    assert headers["CONTENT-TYPE"] == "text/plain"
    assert "content-TYPE" in headers


def test_first_spelling_is_kept_and_value_replaced():
    headers = HttpHeaders()
    headers["Upgrade"] = "h2c"
    headers["UPGRADE"] = "websocket"
    assert list(headers) == ["Upgrade"]
    assert headers["upgrade"] == "websocket"
    assert len(headers) == 1


def test_iteration_is_case_insensitively_sorted():
    headers = HttpHeaders({"b": "2", "A": "1", "C": "3"})
    assert list(headers) == ["A", "b", "C"]


def test_delete_ignores_case():
    headers = HttpHeaders(Host="example.com")
    del headers["HOST"]
    assert "host" not in headers
    with pytest.raises(KeyError):
        headers["host"]


def test_parse_simple_block():
    data = b"Host: example.com\r\nUpgrade: websocket\r\nConnection: Upgrade\r\n\r\n"
    headers = parse_http_headers(io.BytesIO(data))
    assert dict(headers.items()) == {
        "Connection": "Upgrade",
        "Host": "example.com",
        "Upgrade": "websocket",
    }
    assert headers["connection"] == "Upgrade"


def test_parse_stops_after_blank_line():
    stream = io.BytesIO(b"Upgrade: websocket\r\n\r\nframe bytes")
    headers = parse_http_headers(stream)
    assert headers["upgrade"] == "websocket"
    assert stream.read() == b"frame bytes"


def test_value_keeps_later_colons():
    data = b"Location: ws://example.com:8080/path\r\n\r\n"
    headers = parse_http_headers(io.BytesIO(data))
    assert headers["location"] == "ws://example.com:8080/path"


def test_lines_without_colon_are_ignored():
    data = b"no colon here\r\nSec-WebSocket-Version: 13\r\n\r\n"
    headers = parse_http_headers(io.BytesIO(data))
    assert list(headers) == ["Sec-WebSocket-Version"]
    assert headers["sec-websocket-version"] == "13"


def test_later_duplicate_wins():
    data = b"X-Test: one\r\nx-test: two\r\n\r\n"
    headers = parse_http_headers(io.BytesIO(data))
    assert headers["X-TEST"] == "two"
    assert list(headers) == ["X-Test"]


def test_long_line_without_colon_is_skipped():
    data = b"a" * 2000 + b"\r\nSec-WebSocket-Key: abc==\r\n\r\n"
    headers = parse_http_headers(io.BytesIO(data))
    assert dict(headers.items()) == {"Sec-WebSocket-Key": "abc=="}


def test_empty_block():
    headers = parse_http_headers(io.BytesIO(b"\r\n"))
    assert len(headers) == 0


def test_truncated_stream_raises_with_partial_headers():
    data = b"Host: example.com\r\nUpgrade: webs"
    with pytest.raises(HeaderParseError) as info:
        parse_http_headers(io.BytesIO(data))
    assert dict(info.value.headers.items()) == {"Host": "example.com"}


def test_empty_stream_raises():
    with pytest.raises(HeaderParseError):
        parse_http_headers(io.BytesIO(b""))