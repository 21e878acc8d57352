"""Structured logging for KidTube.

structlog events and standard library records (uvicorn, httpx, aiosqlite)
are rendered by the same ``ProcessorFormatter``, so every line carries the
request id and owner id bound for the current request.
"""

import logging
import logging.handlers
import sys
from typing import Any, Dict, List, Optional

import structlog
from structlog.typing import EventDict, Processor

from .config import Config

# Libraries that log every request or query at INFO/DEBUG
QUIET_LIBRARIES: Dict[str, str] = {
    "httpx": "WARNING",
    "httpcore": "WARNING",
    "aiosqlite": "WARNING",
    "uvicorn.access": "WARNING",
}

REDACTED_KEYS = frozenset({"authorization", "token", "jwt_secret", "credentials"})


def redact_secrets(_logger: Any, _method_name: str, event_dict: EventDict) -> EventDict:
    """Mask bearer tokens and secrets passed as event fields."""
    for key in REDACTED_KEYS.intersection(event_dict):
        event_dict[key] = "[redacted]"
    return event_dict


def _shared_processors() -> List[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        redact_secrets,
    ]


def _build_formatter(log_format: str, colors: bool) -> structlog.stdlib.ProcessorFormatter:
    renderer: Processor
    if log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=colors)

    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=_shared_processors(),
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
    )


def setup_logging(config: Config) -> None:
    """
    Configure logging from the application config.

    Console output follows ``logging.format``. When ``logging.file.enabled``
    is set, JSON lines are also written to ``kidtube.log`` in the config
    directory, rotated at midnight with 7 days kept.

    Args:
        config: Application config (logging section and config_dir)

    Example:
        >>> from kidtube.common.config import Config, LoggingConfig
        >>> setup_logging(Config(logging=LoggingConfig(level="DEBUG", format="text")))
    """
    logging_config = config.logging
    log_level = getattr(logging, logging_config.level)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(
        _build_formatter(logging_config.format, colors=sys.stderr.isatty())
    )
    handlers: List[logging.Handler] = [console_handler]

    if logging_config.file.enabled:
        log_file = config.get_log_file_path()
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.TimedRotatingFileHandler(
            filename=str(log_file),
            when="midnight",
            backupCount=7,
            encoding="utf-8",
        )
        file_handler.suffix = "%Y-%m-%d"
        file_handler.setFormatter(_build_formatter("json", colors=False))
        handlers.append(file_handler)

    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()
    for handler in handlers:
        handler.setLevel(log_level)
        root_logger.addHandler(handler)
    root_logger.setLevel(log_level)

    for library, level in {**QUIET_LIBRARIES, **logging_config.third_party}.items():
        logging.getLogger(library).setLevel(getattr(logging, level.upper()))

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *_shared_processors(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def bind_context(**kwargs: Any) -> None:
    """
    Bind context variables that will be included in all subsequent log messages.

    Example:
        >>> bind_context(request_id="abc-123")
        >>> logger.info("video_removed")  # includes request_id
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def bind_owner(owner_id: Optional[str]) -> None:
    """Tag the rest of the current request's log lines with the collection owner."""
    if owner_id is not None:
        structlog.contextvars.bind_contextvars(owner_id=owner_id)


def clear_context() -> None:
    """Clear all bound context variables."""
    structlog.contextvars.clear_contextvars()
