"""Lightweight URL parser following RFC 1738 and RFC 3986."""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass

_SCHEME_EXTRA_CHARS = frozenset("+-.")
_ATOI_RE = re.compile(r"[ \t\n\v\f\r]*([+-]?\d+)")


class UrlParseErrorCode(enum.IntEnum):
    """Reasons a URL can fail to parse."""

    OK = 0
    UNINITIALIZED = 1
    NO_URL_CHARACTER = 2
    INVALID_SCHEME_NAME = 3
    NO_DOUBLE_SLASH = 4
    NO_AT_SIGN = 5
    UNEXPECTED_END_OF_LINE = 6
    NO_SLASH = 7


class UrlParseError(ValueError):
    """Raised when a URL cannot be parsed."""

    def __init__(self, code: UrlParseErrorCode, url: str = "") -> None:
        super().__init__(f"cannot parse URL {url!r}: {code.name.lower()}")
        self.code = code
        self.url = url


@dataclass(frozen=True)
class ParsedUrl:
    """The components of a parsed URL. The port is kept as written."""

    scheme: str = ""
    host: str = ""
    port: str = ""
    path: str = ""
    query: str = ""
    fragment: str = ""
    user_name: str = ""
    password: str = ""

    def port_number(self) -> int:
        """Return the port as an integer in 1..65535, or raise ValueError."""
        match = _ATOI_RE.match(self.port)
        number = int(match.group(1)) if match else 0
        if number <= 0 or number > 65535:
            raise ValueError(f"invalid port {self.port!r}")
        return number


def _is_scheme_valid(scheme: str) -> bool:
    return all(
        (c.isascii() and c.isalpha()) or c in _SCHEME_EXTRA_CHARS for c in scheme
    )


def _scan_until(text: str, start: int, stops: str) -> int:
    """Return the index of the first character in ``stops`` at or after start."""
    pos = start
    while pos < len(text) and text[pos] not in stops:
        pos += 1
    return pos


def parse_url(url: str) -> ParsedUrl:
    """Parse ``url`` into its components, raising UrlParseError on failure."""
    text = url.split("\0", 1)[0]

    colon = text.find(":")
    if colon < 0:
        raise UrlParseError(UrlParseErrorCode.NO_URL_CHARACTER, url)
    scheme = text[:colon]
    if not _is_scheme_valid(scheme):
        raise UrlParseError(UrlParseErrorCode.INVALID_SCHEME_NAME, url)
    scheme = scheme.lower()
    pos = colon + 1

    if text[pos : pos + 2] != "//":
        raise UrlParseError(UrlParseErrorCode.NO_DOUBLE_SLASH, url)
    pos += 2

    end = len(text)
    user_name = ""
    password = ""

    boundary = _scan_until(text, pos, "@/")
    if boundary < end and text[boundary] == "@":
        stop = _scan_until(text, pos, ":@")
        user_name = text[pos:stop]
        pos = stop
        if pos < end and text[pos] == ":":
            pos += 1
            stop = _scan_until(text, pos, "@")
            password = text[pos:stop]
            pos = stop
        if pos >= end or text[pos] != "@":
            raise UrlParseError(UrlParseErrorCode.NO_AT_SIGN, url)
        pos += 1

    if pos < end and text[pos] == "[":
        closing = text.find("]", pos)
        stop = end if closing < 0 else closing + 1
    else:
        stop = _scan_until(text, pos, ":/")
    host = text[pos:stop]
    pos = stop

    port = ""
    if pos < end and text[pos] == ":":
        pos += 1
        stop = _scan_until(text, pos, "/")
        port = text[pos:stop]
        pos = stop

    if pos >= end:
        return ParsedUrl(
            scheme=scheme, host=host, port=port, user_name=user_name, password=password
        )

    if text[pos] != "/":
        raise UrlParseError(UrlParseErrorCode.NO_SLASH, url)
    pos += 1

    stop = _scan_until(text, pos, "#?")
    path = text[pos:stop]
    pos = stop

    query = ""
    if pos < end and text[pos] == "?":
        pos += 1
        stop = _scan_until(text, pos, "#")
        query = text[pos:stop]
        pos = stop

    fragment = ""
    if pos < end and text[pos] == "#":
        fragment = text[pos + 1 :]

    return ParsedUrl(
        scheme=scheme,
        host=host,
        port=port,
        path=path,
        query=query,
        fragment=fragment,
        user_name=user_name,
        password=password,
    )