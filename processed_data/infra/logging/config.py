"""Logging configuration setup.

Provides logging configuration using:
- dictConfig for root and per-logger levels
- QueueHandler + QueueListener so request handling never blocks on I/O
- ContextInjectingFilter for automatic request context propagation
- All handlers behind the root logger (child loggers propagate)
- JSONL format for machine parsing
"""

from __future__ import annotations

import atexit
import logging
import logging.config
from logging.handlers import QueueHandler, QueueListener, RotatingFileHandler
from pathlib import Path
from queue import Queue
from typing import TYPE_CHECKING, Any

from processed_data.infra.logging.context import ContextInjectingFilter
from processed_data.infra.logging.formatters import JSONFormatter

_log_queue: Queue[logging.LogRecord] | None = None
_listener: QueueListener | None = None
_queue_handler: QueueHandler | None = None
logger = logging.getLogger(__name__)
_LOGGING_INITIALIZED = False
_ATEXIT_REGISTERED = False

TEXT_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"
TEXT_DATEFMT = "%Y-%m-%d %H:%M:%S"

if TYPE_CHECKING:
    from processed_data.core.settings.logs import LoggingSettings


def shutdown() -> None:
    """Stop the QueueListener, flushing every pending record.

    Registered with atexit when queue logging starts; safe to call twice.
    """
    global _log_queue, _listener, _queue_handler

    if _listener is not None:
        # QueueListener.stop() drains the queue before joining its thread
        _listener.stop()
        _listener = None

    if _queue_handler is not None:
        logging.getLogger().removeHandler(_queue_handler)
        _queue_handler = None

    _log_queue = None


def setup_logging(
    log_settings: LoggingSettings | None = None,
    *,
    force: bool = False,
    **configure_kwargs: Any,
) -> None:
    """Ensure logging is configured once across entrypoints.

    Args:
        log_settings: Optional logging settings instance. If omitted, settings
            are loaded via get_logging_settings().
        force: Reconfigure logging even if it was already initialized.
        **configure_kwargs: Explicit overrides for configure_logging().
    """
    global _LOGGING_INITIALIZED

    if _LOGGING_INITIALIZED and not force:
        return

    settings_obj = log_settings
    if settings_obj is None:
        from processed_data.core.settings import get_logging_settings

        settings_obj = get_logging_settings()

    log_config = {**settings_obj.to_logging_kwargs(), **configure_kwargs}

    configure_logging(**log_config)
    _LOGGING_INITIALIZED = True


def configure_logging(
    log_level: str = "INFO",
    file_path: str | Path | None = None,
    json_logs: bool = True,
    console_enabled: bool = True,
    include_context: bool = True,
    capture_warnings: bool = True,
    file_max_bytes: int = 10 * 1024 * 1024,
    file_backup_count: int = 5,
    service_name: str = "processed-data",
    logger_levels: dict[str, str] | None = None,
    **kwargs: Any,
) -> None:
    """Configure logging with dictConfig and the QueueHandler pattern.

    Args:
        log_level: Root logger level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        file_path: Path to log file. None disables file logging.
        json_logs: Enable JSONL (JSON Lines) structured logging.
        console_enabled: Enable console/stderr logging.
        include_context: Enable ContextInjectingFilter for auto context.
        capture_warnings: Forward Python warnings to logging system.
        file_max_bytes: Maximum log file size before rotation.
        file_backup_count: Number of rotated log files to keep.
        service_name: Static ``service`` field on JSON records.
        logger_levels: Per-logger level overrides (e.g. sqlalchemy.engine).
        **kwargs: Ignored extra settings.

    Example:
        from processed_data.core.settings import get_logging_settings
        configure_logging(**get_logging_settings().to_logging_kwargs())
    """
    if kwargs:
        logger.debug("Unused logging kwargs supplied: %s", ", ".join(sorted(kwargs.keys())))

    # A previous configuration owns a listener thread; stop it first
    shutdown()

    if capture_warnings:
        logging.captureWarnings(True)

    path = Path(file_path) if file_path else None
    if path:
        path.parent.mkdir(parents=True, exist_ok=True)

    logging_config: dict[str, Any] = {
        "version": 1,
        "disable_existing_loggers": False,
        "loggers": {
            name: {"level": level.upper()} for name, level in (logger_levels or {}).items()
        },
        "root": {
            "level": log_level.upper(),
            "handlers": [],
        },
    }

    logging.config.dictConfig(logging_config)

    _setup_queue_logging(
        console_enabled=console_enabled,
        file_path=path,
        file_max_bytes=file_max_bytes,
        file_backup_count=file_backup_count,
        json_logs=json_logs,
        include_context=include_context,
        service_name=service_name,
    )


def _build_formatter(json_logs: bool, service_name: str) -> logging.Formatter:
    if json_logs:
        return JSONFormatter(static={"service": service_name})
    return logging.Formatter(fmt=TEXT_FORMAT, datefmt=TEXT_DATEFMT)


def _setup_queue_logging(
    console_enabled: bool,
    file_path: Path | None,
    file_max_bytes: int,
    file_backup_count: int,
    json_logs: bool,
    include_context: bool,
    service_name: str,
) -> None:
    """Set up QueueHandler + QueueListener for non-blocking logging.

    Creates the real handlers, attaches them to a QueueListener and puts a
    single QueueHandler on the root logger.

    Args:
        console_enabled: Enable console handler.
        file_path: File path or None.
        file_max_bytes: Max file size.
        file_backup_count: Backup count.
        json_logs: Use JSON format.
        include_context: Attach the ContextInjectingFilter to the queue handler.
        service_name: Static service field for JSON records.
    """
    global _log_queue, _listener, _queue_handler, _ATEXIT_REGISTERED

    _log_queue = Queue()
    formatter = _build_formatter(json_logs, service_name)

    handlers: list[logging.Handler] = []

    if console_enabled:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    if file_path:
        file_handler = RotatingFileHandler(
            file_path,
            maxBytes=file_max_bytes,
            backupCount=file_backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    if not handlers:
        return

    _listener = QueueListener(_log_queue, *handlers, respect_handler_level=True)
    _listener.start()
    if not _ATEXIT_REGISTERED:
        atexit.register(shutdown)
        _ATEXIT_REGISTERED = True

    _queue_handler = QueueHandler(_log_queue)
    # Context must be captured on the emitting task, before the record is queued
    if include_context:
        _queue_handler.addFilter(ContextInjectingFilter())
    logging.getLogger().addHandler(_queue_handler)
