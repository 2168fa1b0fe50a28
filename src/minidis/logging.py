"""structlog setup for minidis."""

from __future__ import annotations

import logging
import re
import sys
from typing import Any

import structlog

LOGGER_PREFIX = "minidis"

# Discord bot tokens: base64 user id, timestamp, HMAC
_TOKEN_PATTERN = re.compile(r"[\w-]{23,28}\.[\w-]{6,7}\.[\w-]{27,}")
_REDACTED = "***REDACTED***"


def redact_tokens(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """structlog processor that masks bot tokens in string values."""
    for key, value in event_dict.items():
        if isinstance(value, str):
            event_dict[key] = _TOKEN_PATTERN.sub(_REDACTED, value)
    return event_dict


def setup_logging(level: str = "info", fmt: str = "console") -> None:
    """Configure stdlib logging and structlog.

    ``fmt`` is ``"console"`` for human-readable output or ``"json"`` for one
    JSON object per line.
    """
    root_level = getattr(logging, level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(root_level)

    renderer: Any
    if fmt == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            redact_tokens,
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name or LOGGER_PREFIX)
