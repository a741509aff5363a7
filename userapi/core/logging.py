"""Logging setup — structlog events rendered through stdlib handlers.

Level and format come from the caller (``create_app`` / the CLI) and fall
back to ``USERAPI_LOG_LEVEL`` / ``USERAPI_LOG_FORMAT``. Any event key named
like a password is masked before rendering.
"""

from __future__ import annotations

import logging
import logging.config
import os
from typing import Any

import structlog

ENV_LOG_LEVEL = "USERAPI_LOG_LEVEL"
ENV_LOG_FORMAT = "USERAPI_LOG_FORMAT"
LOG_FORMATS = ("console", "json")

_SECRET_KEYS = frozenset({"password", "password_hash", "new_password"})
_MASK = "***"


def redact_secrets(
    _logger: Any, _method: str, event_dict: structlog.types.EventDict
) -> structlog.types.EventDict:
    """structlog processor: mask password-like keys."""
    for key in _SECRET_KEYS.intersection(event_dict):
        event_dict[key] = _MASK
    return event_dict


def setup_logging(level: str | None = None, fmt: str | None = None) -> None:
    """Configure structlog and the stdlib root logger.

    Raises ``ValueError`` for an unknown *fmt*.
    """
    level = (level or os.environ.get(ENV_LOG_LEVEL, "INFO")).upper()
    fmt = (fmt or os.environ.get(ENV_LOG_FORMAT, "console")).lower()
    if fmt not in LOG_FORMATS:
        raise ValueError(f"log format must be one of {LOG_FORMATS}, got {fmt!r}")

    pre_chain: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        redact_secrets,
        structlog.processors.format_exc_info,
    ]
    renderer = (
        structlog.processors.JSONRenderer()
        if fmt == "json"
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "structlog": {
                    "()": structlog.stdlib.ProcessorFormatter,
                    "foreign_pre_chain": pre_chain,
                    "processors": [
                        structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                        renderer,
                    ],
                },
            },
            "handlers": {
                "stdout": {
                    "class": "logging.StreamHandler",
                    "stream": "ext://sys.stdout",
                    "formatter": "structlog",
                },
            },
            "root": {"handlers": ["stdout"], "level": level},
            "loggers": {
                # request lines come from RequestIDMiddleware
                "uvicorn.access": {"level": "WARNING"},
                "sqlalchemy.engine": {"level": "WARNING"},
                "aiosqlite": {"level": "WARNING"},
            },
        }
    )
