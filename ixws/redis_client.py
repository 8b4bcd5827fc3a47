"""Minimal Redis client for AUTH, PUBLISH and SUBSCRIBE."""

from __future__ import annotations

import re
import socket
from collections.abc import Callable
from typing import BinaryIO

_LEADING_INT_RE = re.compile(r"\s*([+-]?\d+)")
_SUBSCRIBE_REPLY_EXTRA_LINES = 5
_MESSAGE_INDEX = 2


class RedisError(Exception):
    """Raised when a Redis command cannot be sent or its reply is an error."""


def encode_bulk_string(text: str) -> str:
    """Encode ``text`` as a RESP bulk string."""
    return f"${len(text.encode('utf-8'))}\r\n{text}\r\n"


def _leading_int(text: str) -> int:
    match = _LEADING_INT_RE.match(text)
    return int(match.group(1)) if match else 0


class RedisClient:
    """A single connection to a Redis server."""

    def __init__(self, timeout: float | None = None) -> None:
        self._timeout = timeout
        self._sock: socket.socket | None = None
        self._rfile: BinaryIO | None = None

    def __enter__(self) -> RedisClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def connect(self, hostname: str, port: int) -> None:
        """Open a TCP connection to the server, raising RedisError on failure."""
        self.close()
        try:
            sock = socket.create_connection((hostname, port), self._timeout)
        except OSError as exc:
            raise RedisError(f"Cannot connect to {hostname}:{port}: {exc}") from exc
        self._sock = sock
        self._rfile = sock.makefile("rb")

    def close(self) -> None:
        """Close the connection if one is open."""
        if self._rfile is not None:
            self._rfile.close()
            self._rfile = None
        if self._sock is not None:
            self._sock.close()
            self._sock = None

    def _send(self, text: str) -> None:
        if self._sock is None:
            raise RedisError("socket is not initialized")
        try:
            self._sock.sendall(text.encode("utf-8"))
        except OSError as exc:
            raise RedisError("Cannot write bytes to socket") from exc

    def _read_raw_line(self) -> str:
        """Read one line, keeping its line ending."""
        if self._rfile is None:
            raise RedisError("socket is not initialized")
        try:
            raw = self._rfile.readline()
        except OSError as exc:
            raise RedisError(f"Cannot read from socket: {exc}") from exc
        if not raw.endswith(b"\n"):
            raise RedisError("Connection closed while reading a line")
        return raw.decode("utf-8", errors="replace")

    def _read_line(self) -> str:
        return self._read_raw_line().rstrip("\r\n")

    def _read_bytes(self, size: int) -> bytes:
        if self._rfile is None:
            raise RedisError("socket is not initialized")
        try:
            data = self._rfile.read(size)
        except OSError as exc:
            raise RedisError(f"Cannot read from socket: {exc}") from exc
        if len(data) < size:
            raise RedisError("Connection closed while reading a bulk string")
        return data

    def auth(self, password: str) -> str:
        """Send AUTH and return the server's reply line."""
        self._send(f"AUTH {password}\r\n")
        return self._read_line()

    def publish(self, channel: str, message: str) -> None:
        """Publish ``message`` on ``channel``; raise RedisError with the reply on error."""
        command = "*3\r\n" + "".join(
            encode_bulk_string(part) for part in ("PUBLISH", channel, message)
        )
        self._send(command)
        line = self._read_line()
        # A successful reply is an integer, which starts with ':'.
        if not line.startswith(":"):
            raise RedisError(line)

    def subscribe(
        self,
        channel: str,
        response_callback: Callable[[str], None],
        callback: Callable[[str], None],
    ) -> None:
        """Subscribe to ``channel`` and deliver every message to ``callback``.

        ``response_callback`` receives the raw subscription reply. This call
        only returns by raising RedisError once the connection fails or ends.
        """
        self._send(f"SUBSCRIBE {channel}\r\n")

        reply = [self._read_raw_line()]
        reply.extend(self._read_raw_line() for _ in range(_SUBSCRIBE_REPLY_EXTRA_LINES))
        response_callback("".join(reply))

        while True:
            # "*3" announces an array of three elements.
            array_size = _leading_int(self._read_line()[1:])
            for index in range(array_size):
                string_size = _leading_int(self._read_line()[1:])
                data = self._read_bytes(max(string_size, 0))
                if index == _MESSAGE_INDEX:
                    callback(data.decode("utf-8", errors="replace"))
                if self._rfile is not None:
                    try:
                        self._rfile.read(2)
                    except OSError:
                        pass