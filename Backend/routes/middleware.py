"""
ASGI middleware enforcing the request body ceiling.
"""
from fastapi import HTTPException, Request, status
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.datastructures import Headers
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from config.settings import get_settings


class RequestBodyTooLarge(HTTPException):
    def __init__(self, limit: int):
        super().__init__(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"Request body exceeds {limit} bytes"
        )


def request_too_large_response() -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
        content={"error": "Request body too large"}
    )


async def request_body_too_large_handler(request: Request, exc: RequestBodyTooLarge) -> JSONResponse:
    logger.warning(f"Rejected {request.url.path}: {exc.detail}")
    return request_too_large_response()


class RequestBodyLimitMiddleware:
    """
    Reject bodies larger than MAX_REQUEST_BODY_BYTES.

    A declared Content-Length over the limit is refused before the app runs.
    Bodies without one (chunked uploads) are counted as they are received, and
    RequestBodyTooLarge is raised once the running total passes the limit.
    """

    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        limit = get_settings().MAX_REQUEST_BODY_BYTES

        content_length = Headers(scope=scope).get("content-length")
        if content_length and content_length.isdigit() and int(content_length) > limit:
            logger.warning(f"Rejected {scope['path']} body of {content_length} bytes (limit {limit})")
            await request_too_large_response()(scope, receive, send)
            return

        received = 0
        response_started = False

        async def limited_receive() -> Message:
            nonlocal received
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > limit:
                    raise RequestBodyTooLarge(limit)
            return message

        async def tracked_send(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await self.app(scope, limited_receive, tracked_send)
        except RequestBodyTooLarge as e:
            # Raised outside the exception handlers (e.g. a body read in another middleware)
            if response_started:
                raise
            logger.warning(f"Rejected {scope['path']}: {e.detail}")
            await request_too_large_response()(scope, receive, send)
