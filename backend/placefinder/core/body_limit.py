import logging
from fastapi.responses import JSONResponse

from placefinder.core.logger import logs


class BodySizeLimitMiddleware:
    """
    Rejects request bodies larger than `max_body_bytes` with a 413.
    Counts the bytes actually received, so chunked uploads without a
    Content-Length are limited too. Accepted bodies are replayed to the app.
    """

    def __init__(self, app, max_body_bytes: int):
        self.app = app
        self.max_body_bytes = max_body_bytes

    async def _reject(self, scope, receive, send, size: str):
        logs.log(logging.WARNING, f"Rejected {size} byte body on {scope.get('path')}")
        response = JSONResponse(status_code=413, content={"error": "Request body too large"})
        await response(scope, receive, send)

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        declared = dict(scope.get("headers") or []).get(b"content-length", b"")
        if declared.isdigit() and int(declared) > self.max_body_bytes:
            await self._reject(scope, receive, send, declared.decode())
            return

        chunks = []
        total = 0
        while True:
            message = await receive()
            if message["type"] != "http.request":
                # client went away before the body was complete
                return
            body = message.get("body", b"")
            total += len(body)
            if total > self.max_body_bytes:
                await self._reject(scope, receive, send, f"more than {self.max_body_bytes}")
                return
            chunks.append(body)
            if not message.get("more_body", False):
                break

        body = b"".join(chunks)
        replayed = False

        async def replay():
            nonlocal replayed
            if not replayed:
                replayed = True
                return {"type": "http.request", "body": body, "more_body": False}
            return await receive()

        await self.app(scope, replay, send)
