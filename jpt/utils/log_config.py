import logging
import structlog
from fastapi import Request


def configure_logging(level: str = "INFO", json_logs: bool = False):
    """Configure structlog once per process"""
    renderer = structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer()
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(logging.getLevelName(level.upper())),
        logger_factory=structlog.PrintLoggerFactory(),
    )


logger = structlog.get_logger(__name__)


async def log_requests(request: Request, call_next):
    response = await call_next(request)
    logger.info(
        "request_log",
        path=request.url.path,
        method=request.method,
        status=response.status_code
    )
    return response
