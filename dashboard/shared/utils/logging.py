"""Structured logging for the dashboard core, built on structlog.

Lifecycle code logs snake_case events with keyword context. Service
calls run inside :func:`ad_log_context`, so every event emitted while an
ad is being worked on carries its id and the requested action.
"""

import logging
import sys
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Iterator

import structlog

if TYPE_CHECKING:
    from dashboard.ads.config import AdSettings


def _renderer(json_format: bool) -> list[structlog.types.Processor]:
    if json_format:
        return [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    return [structlog.dev.ConsoleRenderer(colors=True)]


def configure_logging(settings: "AdSettings | None" = None) -> None:
    """
    Configure structlog from the ``ADS_LOG_*`` settings.

    Meant to be called once by the process that embeds the dashboard
    core, before the first lifecycle call.
    """
    if settings is None:
        from dashboard.ads.config import get_ad_settings

        settings = get_ad_settings()

    level = getattr(logging, settings.log_level.upper())
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            *_renderer(settings.log_json),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(service=settings.service_name)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)


@contextmanager
def ad_log_context(ad_id: str, action: str | None = None, **context: Any) -> Iterator[None]:
    """Bind the ad being worked on to every log event inside the block."""
    bound: dict[str, Any] = {"ad_id": ad_id, **context}
    if action:
        bound["action"] = action
    with structlog.contextvars.bound_contextvars(**bound):
        yield
