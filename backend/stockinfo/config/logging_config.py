"""
structlog setup for the API process.

Called once from the application lifespan; modules obtain loggers through
``structlog.get_logger(__name__)``.
"""

from __future__ import annotations

import logging
import sys

import structlog

from stockinfo.config.settings import Settings


def _add_service_context(logger, method_name, event_dict):
    event_dict["service"] = "stockinfo"
    return event_dict


def _resolve_level(level: str) -> int:
    resolved = getattr(logging, level.upper(), None)
    return resolved if isinstance(resolved, int) else logging.INFO


def _renderer_chain(use_json: bool) -> list:
    if use_json:
        return [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    return [structlog.dev.ConsoleRenderer(colors=False)]


def configure_logging(settings: Settings) -> None:
    log_level = _resolve_level(settings.logging.level)
    use_json = settings.logging.json_format or settings.environment == "prod"

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=log_level, force=True)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            _add_service_context,
            *_renderer_chain(use_json),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        logger_factory=structlog.WriteLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    structlog.get_logger(__name__).info(
        "logging_configured",
        environment=settings.environment,
        log_level=logging.getLevelName(log_level),
        json=use_json,
    )
