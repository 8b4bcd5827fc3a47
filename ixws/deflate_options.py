"""Options of the permessage-deflate WebSocket extension."""

from __future__ import annotations

import re
from dataclasses import dataclass

DEFAULT_CLIENT_MAX_WINDOW_BITS = 15
DEFAULT_SERVER_MAX_WINDOW_BITS = 15
MIN_WINDOW_BITS = 8
MAX_WINDOW_BITS = 15

_WHITESPACE = " \t\n\v\f\r"
_LEADING_INT_RE = re.compile(r"[+-]?\d+")


@dataclass(frozen=True)
class PerMessageDeflateOptions:
    """Negotiated or requested permessage-deflate parameters."""

    enabled: bool = False
    client_no_context_takeover: bool = False
    server_no_context_takeover: bool = False
    client_max_window_bits: int = DEFAULT_CLIENT_MAX_WINDOW_BITS
    server_max_window_bits: int = DEFAULT_SERVER_MAX_WINDOW_BITS

    def generate_header(self) -> str:
        """Return the Sec-WebSocket-Extensions header line, CRLF included."""
        parts = ["Sec-WebSocket-Extensions: permessage-deflate"]
        if self.client_no_context_takeover:
            parts.append("; client_no_context_takeover")
        if self.server_no_context_takeover:
            parts.append("; server_no_context_takeover")
        parts.append(f"; server_max_window_bits={self.server_max_window_bits}")
        parts.append(f"; client_max_window_bits={self.client_max_window_bits}")
        parts.append("\r\n")
        return "".join(parts)


def remove_spaces(text: str) -> str:
    """Remove every ASCII whitespace character from ``text``."""
    return "".join(c for c in text if c not in _WHITESPACE)


def _window_bits(token: str) -> int:
    value = token[token.rfind("=") + 1 :]
    match = _LEADING_INT_RE.match(value)
    bits = int(match.group()) if match else 0
    return min(MAX_WINDOW_BITS, max(bits, MIN_WINDOW_BITS))


def parse_extension_header(extension: str) -> PerMessageDeflateOptions:
    """Build options from a Sec-WebSocket-Extensions header value.

    Window bits outside [8, 15] are clamped into that range.
    """
    enabled = False
    client_no_context_takeover = False
    server_no_context_takeover = False
    client_bits = DEFAULT_CLIENT_MAX_WINDOW_BITS
    server_bits = DEFAULT_SERVER_MAX_WINDOW_BITS

    for token in remove_spaces(extension).split(";"):
        if token == "permessage-deflate":
            enabled = True
        elif token == "server_no_context_takeover":
            server_no_context_takeover = True
        elif token == "client_no_context_takeover":
            client_no_context_takeover = True
        elif token.startswith("server_max_window_bits="):
            server_bits = _window_bits(token)
        elif token.startswith("client_max_window_bits="):
            client_bits = _window_bits(token)

    return PerMessageDeflateOptions(
        enabled=enabled,
        client_no_context_takeover=client_no_context_takeover,
        server_no_context_takeover=server_no_context_takeover,
        client_max_window_bits=client_bits,
        server_max_window_bits=server_bits,
    )