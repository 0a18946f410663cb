"""structlog setup for CLI runs: leveled key/value events on stderr"""

import logging
import sys

import structlog


def configure_logging(level: str = "warning") -> None:
    """Route structlog events at or above level to stderr."""
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(logging.getLevelName(level.upper())),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )
