# blobcheck/main.py
import time
from typing import Optional

import sentry_sdk
import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from sentry_sdk.integrations.fastapi import FastApiIntegration

from blobcheck import __version__
from blobcheck.core.errors import register_exception_handlers
from blobcheck.core.logging_config import logger, setup_logging
from blobcheck.core.settings import Settings, get_settings
from blobcheck.middleware.body_limit import BodySizeLimitMiddleware
from blobcheck.middleware.request_id import RequestIdMiddleware
from blobcheck.observability.metrics import latency_hist, router as metrics_router
from blobcheck.routers import health, uploads
from blobcheck.services.storage import LocalUploadStore


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Bouw de receiver. Alle configuratie (upload-dir, size limit, origins)
    komt binnen via settings; handlers lezen niets uit globale state.
    """
    settings = settings or get_settings()

    setup_logging(settings.LOG_LEVEL)
    if settings.SENTRY_DSN:
        sentry_sdk.init(dsn=settings.SENTRY_DSN, integrations=[FastApiIntegration()])

    # ----------------------------------------------------
    # App init
    # ----------------------------------------------------
    app = FastAPI(title="blobcheck", version=__version__)
    app.state.settings = settings
    app.state.store = LocalUploadStore(settings.UPLOAD_DIR)

    # ----------------------------------------------------
    # Middleware (laatst toegevoegd = buitenste laag)
    # ----------------------------------------------------
    app.add_middleware(BodySizeLimitMiddleware, max_bytes=settings.MAX_UPLOAD_BYTES)

    @app.middleware("http")
    async def logging_middleware(request: Request, call_next):
        start = time.time()
        client_ip = request.client.host if request.client else "unknown"

        bound_logger = logger.bind(
            ip=client_ip,
            endpoint=str(request.url.path),
            method=request.method,
        )

        bound_logger.info("request_started")
        response = await call_next(request)
        latency = time.time() - start
        latency_hist.labels(route=str(request.url.path)).observe(latency)

        bound_logger.bind(
            status_code=response.status_code, latency_ms=round(latency * 1000, 2)
        ).info("request_finished")
        return response

    app.add_middleware(RequestIdMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # ----------------------------------------------------
    # Routers
    # ----------------------------------------------------
    app.include_router(health.router)
    app.include_router(uploads.router)
    app.include_router(metrics_router)  # /metrics

    logger.info(
        "startup",
        service="blobcheck-receiver",
        upload_dir=settings.UPLOAD_DIR,
        max_upload_bytes=settings.MAX_UPLOAD_BYTES,
    )
    return app


app = create_app()


def run() -> None:
    """Entry point voor `blobcheck-server`."""
    settings = get_settings()
    logger.info("server_listening", url=f"http://localhost:{settings.PORT}")
    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_level=settings.LOG_LEVEL.lower())


if __name__ == "__main__":
    run()
