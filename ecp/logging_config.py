"""
Structured logging for the ECP comment viewer.

Fetch and tree-building events are logged under the ``ecp`` namespace.
httpx request lines are held back to WARNING unless DEBUG is asked for, so a
refresh logs one "fetched comments" event rather than the raw POST.
"""

import logging
import sys

import structlog

LOGGER_NAMESPACE = "ecp"
NOISY_LOGGERS = ("httpx", "httpcore")


def configure_logging(level: str = "INFO") -> None:
    """Configure structlog for the CLI, TUI and HTML export entry points."""
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=numeric_level,
        force=True,
    )
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(
            numeric_level if numeric_level <= logging.DEBUG else logging.WARNING
        )

    renderer = (
        structlog.processors.JSONRenderer()
        if _is_json_mode()
        else structlog.dev.ConsoleRenderer(colors=True)
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def _is_json_mode() -> bool:
    # Piped or redirected stderr gets one JSON object per line
    return not sys.stderr.isatty()


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Logger for an ``ecp`` module; names outside the package are nested under it."""
    if name != LOGGER_NAMESPACE and not name.startswith(f"{LOGGER_NAMESPACE}."):
        name = f"{LOGGER_NAMESPACE}.{name}"
    return structlog.get_logger(name)
