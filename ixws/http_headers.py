"""Case-insensitive HTTP header map and a header block reader."""

from __future__ import annotations

from collections.abc import Iterator, Mapping, MutableMapping
from typing import BinaryIO

_ASCII_FOLD = str.maketrans(
    "ABCDEFGHIJKLMNOPQRSTUVWXYZ", "abcdefghijklmnopqrstuvwxyz"
)
_MAX_LINE = 1023
_CR = 0x0D
_LF = 0x0A
_COLON = 0x3A


def _fold(key: str) -> str:
    return key.translate(_ASCII_FOLD)


class HttpHeaders(MutableMapping[str, str]):
    """Header names compared without regard to ASCII case, iterated in that order.

    A name keeps the spelling it was first stored under.
    """

    def __init__(self, items: Mapping[str, str] | None = None, **kwargs: str) -> None:
        self._data: dict[str, tuple[str, str]] = {}
        if items is not None:
            self.update(items)
        self.update(kwargs)

    def __getitem__(self, key: str) -> str:
        return self._data[_fold(key)][1]

    def __setitem__(self, key: str, value: str) -> None:
        folded = _fold(key)
        existing = self._data.get(folded)
        name = existing[0] if existing is not None else key
        self._data[folded] = (name, value)

    def __delitem__(self, key: str) -> None:
        folded = _fold(key)
        if folded not in self._data:
            raise KeyError(key)
        self._data.pop(folded)

    def __iter__(self) -> Iterator[str]:
        for folded in sorted(self._data):
            yield self._data[folded][0]

    def __len__(self) -> int:
        return len(self._data)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and _fold(key) in self._data

    def __repr__(self) -> str:
        return f"HttpHeaders({dict(self.items())!r})"


class HeaderParseError(Exception):
    """Raised when the stream ends before the blank line closing the headers."""

    def __init__(self, message: str, headers: HttpHeaders) -> None:
        super().__init__(message)
        self.headers = headers


def _read_line(stream: BinaryIO, headers: HttpHeaders) -> tuple[bytes, int]:
    """Read up to CRLF or the line limit; return the bytes and the first colon."""
    line = bytearray()
    colon = 0
    while len(line) < 2 or (
        len(line) < _MAX_LINE and line[-2] != _CR and line[-1] != _LF
    ):
        byte = stream.read(1)
        if not byte:
            raise HeaderParseError("stream ended while reading HTTP headers", headers)
        if byte[0] == _COLON and colon == 0:
            colon = len(line)
        line += byte
    return bytes(line), colon


def parse_http_headers(stream: BinaryIO) -> HttpHeaders:
    """Read header lines from a binary stream up to and including the blank line.

    Lines without a colon are ignored. The value starts two characters after
    the colon and excludes the line ending.
    """
    headers = HttpHeaders()
    while True:
        line, colon = _read_line(stream, headers)
        if line[0] == _CR and line[1] == _LF:
            return headers
        if colon > 0:
            text = line.decode("latin-1")
            value_length = len(text) - colon - 4
            start = colon + 2
            value = text[start : start + value_length] if value_length >= 0 else text[start:]
            headers[text[:colon]] = value