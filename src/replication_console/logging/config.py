"""Structured logging configuration using structlog."""

from __future__ import annotations

import logging
import sys
from datetime import datetime, timedelta
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

import structlog

# Log file configuration
LOG_DIR = Path.home() / ".local" / "state" / "repcon"
LOG_FILE = LOG_DIR / "repcon.log"
MAX_LOG_SIZE = 10 * 1024 * 1024  # 10 MB
BACKUP_COUNT = 5
RETENTION_DAYS = 30

# Third-party loggers that are far too chatty at DEBUG during 2s polling
NOISY_LOGGERS = ("httpx", "httpcore", "asyncio")

_SHARED_PROCESSORS: list[structlog.types.Processor] = [
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_log_level,
    structlog.stdlib.add_logger_name,
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.UnicodeDecoder(),
]

# Handlers installed by configure_logging, replaced on reconfiguration
_installed_handlers: list[logging.Handler] = []


def _cleanup_old_logs() -> None:
    """Delete log files older than RETENTION_DAYS."""
    if not LOG_DIR.exists():
        return
    cutoff = datetime.now() - timedelta(days=RETENTION_DAYS)
    for log_file in LOG_DIR.glob("repcon.log*"):
        try:
            if datetime.fromtimestamp(log_file.stat().st_mtime) < cutoff:
                log_file.unlink()
        except OSError:
            pass  # best effort


def _setup_file_logging(log_file: Path | None = None) -> RotatingFileHandler:
    """Attach a rotating JSON file handler to the root logger.

    Args:
        log_file: Override for the log file location. Defaults to LOG_FILE.

    Returns:
        The handler that was installed.
    """
    target = log_file or LOG_FILE
    target.parent.mkdir(parents=True, exist_ok=True)

    _cleanup_old_logs()

    file_handler = RotatingFileHandler(
        target,
        maxBytes=MAX_LOG_SIZE,
        backupCount=BACKUP_COUNT,
    )
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=structlog.processors.JSONRenderer(),
            foreign_pre_chain=_SHARED_PROCESSORS,
        )
    )

    logging.getLogger().addHandler(file_handler)
    _installed_handlers.append(file_handler)
    return file_handler


def _resolve_level(verbose: bool, debug: bool) -> int:
    if debug:
        return logging.DEBUG
    if verbose:
        return logging.INFO
    return logging.WARNING


def configure_logging(
    verbose: bool = False,
    debug: bool = False,
    json_output: bool = False,
    console_output: bool = True,
    log_file: Path | None = None,
) -> None:
    """Configure structured logging for the console.

    Logs go to a rotating JSON file under ~/.local/state/repcon/ and, unless
    ``console_output`` is False, to stdout. The dashboard TUI owns the
    terminal, so it configures logging with ``console_output=False``.

    Args:
        verbose: Enable INFO level output.
        debug: Enable DEBUG level output.
        json_output: Render console logs as JSON instead of the dev renderer.
        console_output: Attach the stdout handler.
        log_file: Override for the log file location.
    """
    log_level = _resolve_level(verbose, debug)

    structlog.configure(
        processors=[
            *_SHARED_PROCESSORS,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)  # handlers filter
    for handler in _installed_handlers:
        root_logger.removeHandler(handler)
        handler.close()
    _installed_handlers.clear()

    if console_output:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(log_level)
        if json_output:
            renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
        else:
            renderer = structlog.dev.ConsoleRenderer(
                colors=True,
                exception_formatter=structlog.dev.RichTracebackFormatter(
                    show_locals=debug,
                ),
            )
        console_handler.setFormatter(
            structlog.stdlib.ProcessorFormatter(
                processor=renderer,
                foreign_pre_chain=_SHARED_PROCESSORS,
            )
        )
        root_logger.addHandler(console_handler)
        _installed_handlers.append(console_handler)

    if not debug:
        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    _setup_file_logging(log_file)


def get_logger(name: str | None = None, **initial_context: Any) -> structlog.BoundLogger:
    """Get a configured logger with optional initial context.

    Args:
        name: Logger name. If None, uses the calling module's name.
        **initial_context: Context variables to bind to the logger.

    Returns:
        A bound structlog logger.
    """
    logger: structlog.BoundLogger = structlog.get_logger(name)
    if initial_context:
        logger = logger.bind(**initial_context)
    return logger
