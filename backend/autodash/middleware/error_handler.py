"""
Unified error handling middleware for autodash.

Dataset errors that escape a route become a 400 with their error kind;
anything else becomes a JSON 500 instead of a raw server error.

Implemented as pure ASGI middleware (not BaseHTTPMiddleware) to avoid
the known Starlette issue with stacked BaseHTTPMiddleware corrupting
response bodies.
"""

import json
import logging
import traceback

from starlette.types import ASGIApp, Receive, Scope, Send

from ..core.exceptions import DatasetError

logger = logging.getLogger("autodash.middleware.error_handler")


class ErrorHandlerMiddleware:
    """Catches unhandled exceptions and returns structured JSON error responses."""

    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        try:
            await self.app(scope, receive, send)
        except DatasetError as exc:
            path = scope.get("path", "unknown")
            logger.warning("Dataset error on %s: %s", path, exc.message)
            await _send_json(send, 400, {**exc.to_dict(), "path": path})
        except Exception as exc:
            path = scope.get("path", "unknown")
            method = scope.get("method", "unknown")
            logger.error("Unhandled exception on %s %s: %s", method, path, exc)
            logger.debug(traceback.format_exc())
            await _send_json(send, 500, {
                "error": "internal_server_error",
                "message": "An unexpected error occurred. Please try again.",
                "path": path,
            })


async def _send_json(send: Send, status: int, payload: dict) -> None:
    body = json.dumps(payload).encode("utf-8")
    await send({
        "type": "http.response.start",
        "status": status,
        "headers": [
            [b"content-type", b"application/json"],
            [b"content-length", str(len(body)).encode()],
        ],
    })
    await send({
        "type": "http.response.body",
        "body": body,
    })
