"""
Global error handling middleware.

Pure ASGI middleware, so async generator dependencies such as
get_db_session() keep working.
"""
import json

from fastapi import HTTPException
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from quietstats.core.logging import get_logger

logger = get_logger(__name__)


def _error_body(exc: Exception, request_id: str | None) -> bytes:
    payload = {
        "detail": "Internal server error",
        "type": type(exc).__name__,
    }
    if request_id:
        payload["requestId"] = request_id
    return json.dumps(payload).encode("utf-8")


class ErrorHandlerMiddleware:
    """
    Turns exceptions that escape the routes into JSON 500 responses.

    HTTPException passes through to FastAPI's own handler. Storage errors
    raised while reading events end up here.
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        response_started = False

        async def send_wrapper(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        except HTTPException:
            raise
        except Exception as e:
            path = scope.get("path", "unknown")
            if response_started:
                # Headers already sent
                logger.exception("Unhandled exception after response started", path=path)
                raise

            logger.exception("Unhandled exception", error=str(e), path=path)

            request_id = scope.get("state", {}).get("request_id")
            body = _error_body(e, request_id)
            await send({
                "type": "http.response.start",
                "status": 500,
                "headers": [
                    [b"content-type", b"application/json"],
                    [b"content-length", str(len(body)).encode()],
                ],
            })
            await send({
                "type": "http.response.body",
                "body": body,
            })
