"""structlog setup for the timetable watcher.

Console rendering for interactive runs, JSON lines for long-running watch
processes. Everything goes to stderr so scripts can print rendered
schedules on stdout. Modules log through get_logger(__name__) with
snake_case event names and key/value context.
"""

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager

import structlog


def setup_logging(json_output: bool = False, log_level: str = "INFO") -> None:
    """Configure structlog and route stdlib loggers to the same stream.

    Args:
        json_output: Emit JSON lines instead of the colored console format.
        log_level: Minimum level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]
    if json_output:
        processors += [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(ensure_ascii=False),
        ]
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )

    # aiosqlite and urllib3 log through stdlib logging
    root = logging.getLogger()
    root.handlers = [logging.StreamHandler(sys.stderr)]
    root.setLevel(level)


def get_logger(name: str) -> structlog.BoundLogger:
    """Logger bound to a module name (pass __name__)."""
    return structlog.get_logger(name)


@contextmanager
def group_context(group: str) -> Iterator[None]:
    """Bind the group key to every log event emitted inside the block.

    Args:
        group: Group key being refreshed (e.g. "ИС502.1").
    """
    with structlog.contextvars.bound_contextvars(group=group):
        yield
