# blobcheck/core/errors.py
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from blobcheck.core.logging_config import logger


def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse({"error": exc.detail}, status_code=exc.status_code, headers=exc.headers)


def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "server_error",
        path=str(request.url.path),
        method=request.method,
        error=str(exc),
        exc_info=exc,
    )
    return JSONResponse(
        {"error": "Internal server error", "message": str(exc)},
        status_code=500,
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
