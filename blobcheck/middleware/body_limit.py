# blobcheck/middleware/body_limit.py
from starlette.datastructures import Headers
from starlette.responses import JSONResponse
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from blobcheck.core.logging_config import logger
from blobcheck.observability.metrics import upload_counter

# ruimte voor multipart boundaries, part-headers en kleine tekstvelden
MULTIPART_FRAMING_ALLOWANCE = 64 * 1024


class PayloadTooLarge(Exception):
    pass


def too_large_response(max_bytes: int) -> JSONResponse:
    upload_counter.labels(result="too_large").inc()
    return JSONResponse(
        {
            "error": "Payload too large",
            "message": f"File part exceeds {max_bytes} bytes",
        },
        status_code=413,
    )


class BodySizeLimitMiddleware:
    """
    Grove bovengrens op de hele request body: max_bytes (de grens voor het
    file-part) plus MULTIPART_FRAMING_ALLOWANCE. De exacte grens op het
    file-part zelf bewaakt de upload-route.
    - Content-Length boven de body-grens: direct 413, body wordt niet gelezen.
    - Chunked bodies: bytes tellen tijdens het streamen, afbreken bij overschrijding.
    """

    def __init__(self, app: ASGIApp, max_bytes: int):
        self.app = app
        self.max_bytes = max_bytes
        self.max_body_bytes = max_bytes + MULTIPART_FRAMING_ALLOWANCE

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        declared = Headers(scope=scope).get("content-length")
        if declared is not None and declared.isdigit() and int(declared) > self.max_body_bytes:
            logger.warning("upload_rejected_too_large", content_length=int(declared))
            await too_large_response(self.max_bytes)(scope, receive, send)
            return

        received = 0
        response_started = False

        async def limited_receive() -> Message:
            nonlocal received
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > self.max_body_bytes:
                    raise PayloadTooLarge()
            return message

        async def tracking_send(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await self.app(scope, limited_receive, tracking_send)
        except PayloadTooLarge:
            logger.warning("upload_rejected_too_large", received=received)
            if response_started:
                raise
            await too_large_response(self.max_bytes)(scope, receive, send)
