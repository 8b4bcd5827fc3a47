"""Queue that lets WebSocket messages be handled on the caller's own thread."""

from __future__ import annotations

import threading
from collections import deque
from collections.abc import Callable
from typing import Any, Protocol


class _MessageSource(Protocol):
    def set_on_message_callback(self, callback: Callable[[Any], None]) -> None: ...


def _ignore_message(message: Any) -> None:
    """Stand-in callback left on a websocket once it is unbound; drops the message."""
    del message


class WebSocketMessageQueue:
    """Collects messages from a bound websocket and hands them out in ``poll``."""

    def __init__(self, websocket: _MessageSource | None = None) -> None:
        self._websocket: _MessageSource | None = None
        self._callback: Callable[[Any], None] | None = None
        self._lock = threading.Lock()
        self._messages: deque[Any] = deque()
        self.bind_websocket(websocket)

    def __enter__(self) -> WebSocketMessageQueue:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.bind_websocket(None)

    def _enqueue(self, message: Any) -> None:
        with self._lock:
            self._messages.append(message)

    def bind_websocket(self, websocket: _MessageSource | None) -> None:
        """Receive messages from ``websocket`` instead of the current one."""
        if self._websocket is websocket:
            return
        if self._websocket is not None:
            self._websocket.set_on_message_callback(_ignore_message)
        self._websocket = websocket
        if websocket is not None:
            websocket.set_on_message_callback(self._enqueue)

    def set_on_message_callback(self, callback: Callable[[Any], None] | None) -> None:
        """Set the function that ``poll`` delivers messages to."""
        self._callback = callback

    def pop_message(self) -> Any | None:
        """Remove and return the oldest queued message, or None if there is none."""
        with self._lock:
            return self._messages.popleft() if self._messages else None

    def poll(self, count: int = 512) -> None:
        """Deliver up to ``count`` queued messages to the callback, oldest first."""
        if self._callback is None:
            return
        while count > 0:
            message = self.pop_message()
            if message is None:
                break
            self._callback(message)
            count -= 1