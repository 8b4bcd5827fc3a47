"""Client that reports Lua errors from event messages to a Sentry server."""

from __future__ import annotations

import json
import logging
import re
import time
import urllib.error
import urllib.request
from dataclasses import dataclass, field
from typing import Any

logger = logging.getLogger(__name__)

_DSN_RE = re.compile(r"(http[s]?)://([^:]+):([^@]+)@([^/]+)/([0-9]+)")
_LUA_FRAME_RE = re.compile(r"\t([^/]+):([0-9]+): in function '([^/]+)'")
_NOISY_TYPES_ID = "game_noisytypes_id"
_TRANSFER_TIMEOUT_SECS = 5 * 60


@dataclass
class SentryResponse:
    """What the server answered to an uploaded event."""

    status_code: int
    headers: dict[str, str] = field(default_factory=dict)
    payload: bytes = b""
    error_msg: str = ""
    upload_size: int = 0
    download_size: int = 0


def parse_lua_stack_trace(stack: str) -> list[dict[str, Any]]:
    """Extract frames from a Lua traceback, innermost frame last."""
    frames = []
    for line in stack.split("\n"):
        match = _LUA_FRAME_RE.fullmatch(line)
        if match:
            frames.append(
                {
                    "lineno": int(match.group(2)),
                    "filename": match.group(1),
                    "function": match.group(3),
                }
            )
    frames.reverse()
    return frames


def parse_exception_name(stack: str) -> str:
    """Return the first line of ``stack``."""
    return stack.split("\n", 1)[0]


def _get(value: Any, key: str) -> Any:
    return value.get(key) if isinstance(value, dict) else None


def _as_string(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return json.dumps(value)


class SentryClient:
    """Builds Sentry store payloads and posts them to the DSN's project."""

    def __init__(self, dsn: str) -> None:
        self.dsn = dsn
        self.valid_dsn = False
        self.url = ""
        self.public_key = ""
        self.secret_key = ""

        match = _DSN_RE.fullmatch(dsn)
        if match:
            scheme, public_key, secret_key, host, project_id = match.groups()
            self.valid_dsn = True
            self.url = f"{scheme}://{host}/api/{project_id}/store/"
            self.public_key = public_key
            self.secret_key = secret_key

    def compute_auth_header(self) -> str:
        """Return the X-Sentry-Auth header value."""
        return (
            "Sentry sentry_version=5"
            ",sentry_client=ws/1.0.0"
            f",sentry_timestamp={int(time.time())}"
            f",sentry_key={self.public_key}"
            f",sentry_secret={self.secret_key}"
        )

    def compute_payload(self, msg: dict[str, Any]) -> str:
        """Return the compact JSON event for ``msg``, newline terminated."""
        is_noisy_types = _get(msg, "id") == _NOISY_TYPES_ID
        stack_field = "traceback" if is_noisy_types else "stack"
        data = _get(msg, "data")
        stack = _as_string(_get(data, stack_field))

        exception = {
            "stacktrace": {"frames": parse_lua_stack_trace(stack)},
            "value": parse_exception_name(stack)
            if is_noisy_types
            else _get(data, "message"),
        }

        device = _get(msg, "device")
        payload = {
            "platform": "python",
            "sdk": {"name": "ws", "version": "1.0.0"},
            "timestamp": time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime()),
            "exception": [exception],
            "tags": [
                ["game", _get(device, "game")],
                ["userid", _get(device, "user_id")],
                ["environment", _get(device, "environment")],
            ],
        }
        return json.dumps(payload, separators=(",", ":"), sort_keys=True) + "\n"

    def send(self, msg: dict[str, Any], verbose: bool = False) -> tuple[SentryResponse, str]:
        """Post the event built from ``msg``; return the response and the body sent."""
        if not self.valid_dsn:
            raise ValueError(f"invalid Sentry DSN: {self.dsn!r}")

        body = self.compute_payload(msg)
        data = body.encode("utf-8")
        request = urllib.request.Request(
            self.url,
            data=data,
            method="POST",
            headers={"X-Sentry-Auth": self.compute_auth_header()},
        )
        if verbose:
            logger.info("request logger: POST %s", self.url)

        try:
            with urllib.request.urlopen(request, timeout=_TRANSFER_TIMEOUT_SECS) as reply:
                content = reply.read()
                response = SentryResponse(
                    reply.status, dict(reply.headers.items()), content, "",
                    len(data), len(content),
                )
        except urllib.error.HTTPError as exc:
            content = exc.read() or b""
            headers = dict(exc.headers.items()) if exc.headers is not None else {}
            response = SentryResponse(
                exc.code, headers, content, str(exc.reason), len(data), len(content)
            )
        except urllib.error.URLError as exc:
            response = SentryResponse(0, {}, b"", str(exc.reason), len(data), 0)
        except OSError as exc:
            response = SentryResponse(0, {}, b"", str(exc), len(data), 0)

        if verbose:
            for name, value in response.headers.items():
                logger.info("%s: %s", name, value)
            logger.info("Upload size: %d", response.upload_size)
            logger.info("Download size: %d", response.download_size)
            logger.info("Status: %d", response.status_code)
            if response.error_msg:
                logger.info("error message: %s", response.error_msg)
            if response.headers.get("Content-Type") != "application/octet-stream":
                logger.info("payload: %s", response.payload.decode("utf-8", "replace"))

        return response, body