"""structlog setup for the customer API.

Every probe logs through structlog; this module only decides how events are
rendered and which levels are kept.
"""

import logging
import os
import sys

import structlog

from infrastructure.settings import get_settings

_TRUTHY = ("1", "true", "yes")


def _wants_colors() -> bool:
    # FORCE_COLOR covers non-TTY containers whose logs are read by humans
    if os.environ.get("FORCE_COLOR", "").lower() in _TRUTHY:
        return True
    return sys.stdout.isatty()


def configure_logging(debug: bool | None = None) -> None:
    """Configure structlog for console or JSON output.

    A colored console renderer is used on a TTY or when FORCE_COLOR is set;
    otherwise events are rendered as one JSON object per line. Debug-level
    probe events (row lookups, predicate decisions) are dropped unless
    ``debug`` is set; when omitted it comes from ``CUSTOMER_API_DEBUG``.
    """
    if debug is None:
        debug = get_settings().debug

    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    if _wants_colors():
        processors.append(structlog.dev.ConsoleRenderer(colors=True))
    else:
        processors.append(structlog.processors.format_exc_info)
        processors.append(structlog.processors.JSONRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.DEBUG if debug else logging.INFO
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
