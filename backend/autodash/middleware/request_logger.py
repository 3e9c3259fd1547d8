"""
Request logging middleware for autodash.

Logs every request with method, path, status code and duration, and tags
the response with a request id so client reports can be matched to log
lines.
"""

import logging
import time
import uuid

from starlette.types import ASGIApp, Receive, Scope, Send

logger = logging.getLogger("autodash.middleware.request_logger")


class RequestLoggerMiddleware:
    """Logs one line per HTTP request and adds timing/id headers."""

    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        start_time = time.perf_counter()
        request_id = uuid.uuid4().hex[:12]
        status_code = 0

        async def send_wrapper(message):
            nonlocal status_code
            elapsed_ms = round((time.perf_counter() - start_time) * 1000, 2)
            if message["type"] == "http.response.start":
                status_code = message.get("status", 0)
                headers = list(message.get("headers", []))
                headers.append([b"x-request-id", request_id.encode()])
                headers.append([b"x-response-time-ms", str(elapsed_ms).encode()])
                message = {**message, "headers": headers}
            elif message["type"] == "http.response.body" and not message.get("more_body", False):
                logger.info(
                    "[%s] %s %s -> %s (%.2fms)",
                    request_id, scope.get("method", "?"), scope.get("path", "?"),
                    status_code, elapsed_ms,
                )
            await send(message)

        await self.app(scope, receive, send_wrapper)
