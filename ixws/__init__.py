"""WebSocket building blocks: URLs, deflate options, headers, frames, a message queue, and Redis and Sentry clients."""

__version__ = "0.1.0"

__all__ = [
    "deflate_options",
    "frames",
    "http_headers",
    "message_queue",
    "redis_client",
    "sentry_client",
    "url_parser",
]