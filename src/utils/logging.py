"""structlog configuration for the IFSC lookup service.

One processor chain, two renderers: a ConsoleRenderer while developing and
a JSONRenderer when ``APP_ENV=production`` (or ``json_output=True``).
The root stdlib logger is routed through the same chain, so uvicorn,
httpx, aiosqlite and redis lines look like the service's own.

Request-scoped values bound with ``structlog.contextvars`` (the request id
set by the HTTP middleware) are merged into every line automatically.
"""

import logging
import os
import sys
from typing import TextIO

import structlog

# Libraries that log every request or connection at INFO.
_NOISY_LOGGERS = ("httpx", "httpcore", "aiosqlite", "redis")


def _shared_processors() -> list[structlog.types.Processor]:
    # contextvars first so request-scoped keys appear on every line.
    return [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]


def _renderer(use_json: bool, output: TextIO) -> structlog.types.Processor:
    if use_json:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=output.isatty())


def configure_logging(
    log_level: str = "INFO",
    json_output: bool = False,
    stream: TextIO | None = None,
) -> structlog.BoundLogger:
    """Configure structlog and the stdlib root logger.

    Args:
        log_level: Minimum level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        json_output: Force JSON lines. Otherwise JSON is used only when
                     APP_ENV is "production".
        stream: Destination for every log line. Defaults to stdout; the
                lookup CLI passes stderr to keep stdout for results.

    Returns:
        A configured structlog BoundLogger.
    """
    use_json = json_output or os.environ.get("APP_ENV", "development") == "production"
    output = stream or sys.stdout
    level = logging.getLevelName(log_level.upper())
    shared = _shared_processors()
    renderer = _renderer(use_json, output)

    structlog.configure(
        processors=[*shared, renderer],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=output),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(output)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
        )
    )
    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    return structlog.get_logger()


def get_logger(name: str) -> structlog.BoundLogger:
    """Return a structlog logger tagged with *name*.

    Configures logging with defaults on first use if nothing else has.
    """
    if not structlog.is_configured():
        configure_logging()

    return structlog.get_logger(logger_name=name)
