"""Logging configuration for the service.

Standard library logging carries the records; structlog shapes them. Besides
the console, two operational log files live in ``settings.log_dir``:

- ``messages.log``: every record at INFO and above
- ``errors.log``: records at ERROR and above

Each line in those files is one JSON object. The log rotation worker
compresses and truncates them (see ``maintenance.log_rotation``).
"""

import logging
import sys
from pathlib import Path
from typing import Any

import structlog

from shared.config import Settings

MESSAGES_LOG = "messages.log"
ERRORS_LOG = "errors.log"

_LEVELS = {
    "production": "INFO",
    "staging": "INFO",
    "development": "DEBUG",
    "local": "DEBUG",
    "test": "WARNING",
}


def get_log_level(settings: Settings) -> str:
    """Explicit ``log_level`` wins, otherwise derived from the environment name."""
    if settings.log_level:
        return settings.log_level.upper()
    return _LEVELS.get(settings.env.lower(), "INFO")


def _shared_processors() -> list:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        structlog.processors.CallsiteParameterAdder(
            parameters=[
                structlog.processors.CallsiteParameter.FILENAME,
                structlog.processors.CallsiteParameter.LINENO,
                structlog.processors.CallsiteParameter.FUNC_NAME,
            ]
        ),
    ]


def _formatter(*processors) -> structlog.stdlib.ProcessorFormatter:
    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=_shared_processors(),
        processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, *processors],
    )


def _console_processors(settings: Settings) -> list:
    if settings.is_production:
        return [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    return [
        structlog.dev.ConsoleRenderer(
            colors=True,
            exception_formatter=structlog.dev.RichTracebackFormatter(
                show_locals=True,
                max_frames=2,
            ),
        )
    ]


def setup_stdlib_logging(settings: Settings) -> None:
    """Attach console and operational file handlers to the root logger."""
    log_level = get_log_level(settings)

    log_dir = Path(settings.log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers = []

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(_formatter(*_console_processors(settings)))

    # Tracebacks are rendered to text inside the JSON record
    file_formatter = _formatter(structlog.processors.format_exc_info, structlog.processors.JSONRenderer())

    messages_handler = logging.FileHandler(log_dir / MESSAGES_LOG, mode="a", encoding="utf-8")
    messages_handler.setLevel(logging.INFO)
    messages_handler.setFormatter(file_formatter)

    errors_handler = logging.FileHandler(log_dir / ERRORS_LOG, mode="a", encoding="utf-8")
    errors_handler.setLevel(logging.ERROR)
    errors_handler.setFormatter(file_formatter)

    root_logger.addHandler(console_handler)
    root_logger.addHandler(messages_handler)
    root_logger.addHandler(errors_handler)

    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def setup_structlog() -> None:
    """Route structlog through the stdlib handlers configured above."""
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *_shared_processors(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def configure_logging(settings: Settings) -> None:
    """Configure all logging for the application."""
    setup_stdlib_logging(settings)
    setup_structlog()


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a configured logger instance."""
    return structlog.get_logger(name)


def add_context(**kwargs: Any) -> None:
    """Add context variables that will be included in all subsequent log messages."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Clear all context variables."""
    structlog.contextvars.clear_contextvars()
