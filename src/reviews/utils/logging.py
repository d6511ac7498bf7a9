"""Logging for ClearWindow.

Stdlib logging owns the handlers: stdout plus two rotating files under
``LOG_DIR`` (everything, and errors only). structlog renders key/value
events on top, as JSON in production and staging and through the rich
console renderer elsewhere. Per-request fields (method, path, user) are
carried in structlog's contextvars.
"""

import logging
import logging.handlers
import os
import sys
from pathlib import Path

import structlog

LEVEL_BY_ENVIRONMENT = {"production": "INFO", "staging": "INFO", "development": "DEBUG", "test": "WARNING"}

# Chatty third-party loggers; passlib warns on every start about the bcrypt version attribute
QUIET_LOGGERS = {"protean": logging.WARNING, "multipart": logging.WARNING, "asyncio": logging.WARNING, "passlib": logging.ERROR}

ROTATE_BYTES = 10 * 1024 * 1024
ROTATE_BACKUPS = 5


def current_environment() -> str:
    return (os.getenv("ENV") or os.getenv("ENVIRONMENT") or os.getenv("PROTEAN_ENV") or "development").lower()


def get_log_level() -> str:
    return os.getenv("LOG_LEVEL", LEVEL_BY_ENVIRONMENT.get(current_environment(), "INFO"))


def _rotating_file(path: Path, level) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        filename=path, maxBytes=ROTATE_BYTES, backupCount=ROTATE_BACKUPS, encoding="utf-8"
    )
    handler.setLevel(level)
    return handler


def setup_stdlib_logging(level: str | None = None, log_dir: str | None = None, log_file_prefix: str = "clearwindow") -> None:
    log_level = level or get_log_level()
    log_path = Path(log_dir or os.getenv("LOG_DIR", "logs"))
    log_path.mkdir(parents=True, exist_ok=True)

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(log_level)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers = [
        console,
        _rotating_file(log_path / f"{log_file_prefix}.log", log_level),
        _rotating_file(log_path / f"{log_file_prefix}_error.log", logging.ERROR),
    ]

    for name, quiet_level in QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(quiet_level)


def _renderer():
    if current_environment() in ("production", "staging"):
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(
        colors=True,
        exception_formatter=structlog.dev.RichTracebackFormatter(show_locals=False, max_frames=2),
    )


def setup_structlog() -> None:
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            _renderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def configure_logging(level: str | None = None, log_dir: str | None = None, log_file_prefix: str = "clearwindow") -> None:
    setup_stdlib_logging(level=level, log_dir=log_dir, log_file_prefix=log_file_prefix)
    setup_structlog()


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def bind_request(method: str, path: str) -> None:
    """Start a fresh log context for an incoming request."""
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(method=method, path=path)


def bind_user(user_id: str) -> None:
    """Attach the authenticated account to the rest of the request's log events."""
    structlog.contextvars.bind_contextvars(user_id=user_id)
