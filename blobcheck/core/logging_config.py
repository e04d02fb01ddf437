# blobcheck/core/logging_config.py
import logging
import sys
import structlog


def setup_logging(level: str = "INFO") -> None:
    """
    Eén JSON-regel per event op stdout, voor receiver én client-CLI.
    Het request_id uit RequestIdMiddleware komt via contextvars mee in elk event.
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level.upper(), logging.INFO),
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


# upload_*, request_* en health_* events van de hele package
logger = structlog.get_logger("blobcheck")
