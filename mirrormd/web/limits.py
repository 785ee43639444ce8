from __future__ import annotations

import logging

from starlette.datastructures import Headers
from starlette.responses import JSONResponse
from starlette.types import ASGIApp, Message, Receive, Scope, Send

log = logging.getLogger(__name__)


class BodySizeLimitMiddleware:
    """
    Reject request bodies larger than max_bytes with 413.

    A declared Content-Length is checked up front; otherwise (chunked uploads)
    the body is buffered while counting and the request is refused as soon as
    the running total passes the limit. Accepted bodies are replayed to the app.
    """

    def __init__(self, app: ASGIApp, max_bytes: int) -> None:
        self.app = app
        self.max_bytes = max_bytes

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        length = Headers(scope=scope).get("content-length")
        if length is not None:
            try:
                declared = int(length)
            except ValueError:
                await JSONResponse(status_code=400, content={"error": "Invalid Content-Length"})(
                    scope, receive, send
                )
                return
            if declared > self.max_bytes:
                await self._reject(scope, receive, send)
                return

        body = bytearray()
        while True:
            message = await receive()
            if message["type"] != "http.request":
                # client went away before the body was complete
                return
            body += message.get("body", b"")
            if len(body) > self.max_bytes:
                await self._reject(scope, receive, send)
                return
            if not message.get("more_body", False):
                break

        replayed = False

        async def replay() -> Message:
            nonlocal replayed
            if not replayed:
                replayed = True
                return {"type": "http.request", "body": bytes(body), "more_body": False}
            return await receive()

        await self.app(scope, replay, send)

    async def _reject(self, scope: Scope, receive: Receive, send: Send) -> None:
        log.warning("Rejected %s %s: body exceeds %d bytes", scope["method"], scope["path"], self.max_bytes)
        response = JSONResponse(
            status_code=413,
            content={
                "error": "Payload too large",
                "message": f"Request body exceeds {self.max_bytes} bytes",
            },
        )
        await response(scope, receive, send)
