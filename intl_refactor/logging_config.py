"""Logging configuration.

Usage:
    from intl_refactor.logging_config import configure_logging, get_logger

    configure_logging(level="DEBUG")
    log = get_logger()
    log.info("Scan started", root="lib")
"""

import logging
import sys
from typing import Optional

import structlog

# Track if logging has been configured
_configured = False


def configure_logging(level: str = "INFO", json_output: bool = False, colors: Optional[bool] = None) -> None:
    """
    Configure structlog for the command line tool.

    Diagnostics go to stderr so command output on stdout stays clean.
    Calling it again replaces the previous configuration.

    Args:
        level: Minimum log level (DEBUG, INFO, WARNING, ERROR)
        json_output: Render one JSON object per line
        colors: Enable colors (auto-detect TTY if None)
    """
    global _configured

    if colors is None:
        colors = sys.stderr.isatty()

    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        format="%(message)s",
        level=numeric_level,
        handlers=[logging.StreamHandler()],
        force=True,
    )

    if json_output:
        renderer: structlog.typing.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=colors)

    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="%H:%M:%S"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )

    _configured = True


def get_logger(name: Optional[str] = None) -> structlog.typing.FilteringBoundLogger:
    """
    Get a configured logger instance.

    Applies the default configuration first if nothing configured logging yet.

    Args:
        name: Optional logger name (usually module __name__)
    """
    if not _configured:
        configure_logging()
    return structlog.get_logger(name)
