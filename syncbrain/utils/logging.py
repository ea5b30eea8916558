"""structlog configuration for SyncBrain.

One processor chain serves both structlog loggers and stdlib ``logging``
(uvicorn, httpx, chromadb), so every line has the same shape.  Rendering
is colourised console output in development and one JSON object per line
when ``APP_ENV=production`` or ``json_output`` is set.

Logs go to stderr; stdout is reserved for CLI command output.
"""

import logging
import os
import sys
from collections.abc import Iterable, MutableMapping
from typing import Any

import structlog

# Third-party loggers that are chatty at INFO (telemetry notices, one line
# per HTTP request, browser driver chatter).
NOISY_LOGGERS: tuple[str, ...] = (
    "chromadb",
    "httpx",
    "httpcore",
    "openai",
    "anthropic",
    "asyncio",
)

_SECRET_SUFFIXES = ("api_key", "_token", "password", "secret")
REDACTED = "***"


def redact_secrets(
    _logger: Any, _method_name: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """Mask the value of any credential-looking key."""
    for key, value in event_dict.items():
        if value and key.lower().endswith(_SECRET_SUFFIXES):
            event_dict[key] = REDACTED
    return event_dict


def configure_logging(
    log_level: str = "INFO",
    json_output: bool = False,
    quiet_loggers: Iterable[str] = NOISY_LOGGERS,
) -> structlog.BoundLogger:
    """Configure structlog and the stdlib root logger.

    Args:
        log_level: Minimum level name (DEBUG, INFO, WARNING, ERROR).
        json_output: Force JSON rendering regardless of ``APP_ENV``.
        quiet_loggers: stdlib logger names capped at WARNING.

    Returns:
        The root structlog logger.
    """
    level_name = log_level.upper()
    use_json = json_output or os.environ.get("APP_ENV", "development") == "production"

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        redact_secrets,
    ]
    renderer: structlog.types.Processor = (
        structlog.processors.JSONRenderer()
        if use_json
        else structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
    )

    structlog.configure(
        processors=[*shared_processors, renderer],
        wrapper_class=structlog.make_filtering_bound_logger(logging.getLevelName(level_name)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                *shared_processors,
                renderer,
            ],
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level_name)

    for name in quiet_loggers:
        logging.getLogger(name).setLevel(max(logging.WARNING, root_logger.level))

    return structlog.get_logger()


def get_logger(name: str) -> structlog.BoundLogger:
    """Named logger; configures defaults on first use."""
    if not structlog.is_configured():
        configure_logging()
    return structlog.get_logger(logger_name=name)
