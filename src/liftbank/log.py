import logging
import os

import structlog


def configure_logging() -> None:
    """
    Set up structured JSON logging for the simulator using structlog.

    The standard logging module emits plain messages and structlog renders
    each event as a JSON object with an ISO timestamp and the log level.
    The level comes from ``LOG_LEVEL`` (default ``INFO``).

    Call this once at startup so every module shares the configuration.
    """
    log_level = os.getenv("LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        format="%(message)s",
        level=getattr(logging, log_level, logging.INFO),
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.stdlib.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
