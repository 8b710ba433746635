"""Logging for the worker: Lambda-aware handlers and per-invocation request ids."""

from __future__ import annotations

import logging
import os
from contextvars import ContextVar, Token
from logging.handlers import RotatingFileHandler
from pathlib import Path

from pdrflow.config import Settings

_LAMBDA_WRITABLE_ROOT = Path("/tmp")
_request_id: ContextVar[str] = ContextVar("pdrflow_request_id", default="-")


def running_on_lambda() -> bool:
    return bool(os.environ.get("AWS_LAMBDA_FUNCTION_NAME"))


def bind_request_id(request_id: str | None) -> Token[str]:
    """Tag every record logged in the current context with `request_id`."""
    return _request_id.set(str(request_id or "-"))


def reset_request_id(token: Token[str]) -> None:
    _request_id.reset(token)


class RequestIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = _request_id.get()
        return True


def log_file_path(settings: Settings) -> Path | None:
    """Where the optional log file goes; None when file logging is off.

    On Lambda only /tmp is writable, so relative paths (and `log_dir`) are
    re-rooted there.
    """
    if not settings.logging.file:
        return None
    path = Path(str(settings.logging.file))
    if running_on_lambda():
        if path.is_absolute() and path.is_relative_to(_LAMBDA_WRITABLE_ROOT):
            return path
        return _LAMBDA_WRITABLE_ROOT / "pdrflow" / path.name
    if path.is_absolute():
        return path
    return Path(settings.log_dir) / path


def setup_logging(settings: Settings) -> None:
    """Configure the `pdrflow` logger once per process (warm containers reuse it).

    Botocore and the Lambda runtime's root handler are left alone.
    """
    logger = logging.getLogger("pdrflow")
    if getattr(logger, "_pdrflow_configured", False):
        return

    level = getattr(logging, str(settings.logging.level or "INFO").upper(), logging.INFO)
    formatter = logging.Formatter(fmt=str(settings.logging.format), datefmt=str(settings.logging.datefmt))
    request_ids = RequestIdFilter()

    handlers: list[logging.Handler] = []
    if settings.logging.console:
        handlers.append(logging.StreamHandler())

    file_path = log_file_path(settings)
    if file_path is not None:
        file_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            RotatingFileHandler(
                file_path,
                maxBytes=int(settings.logging.max_bytes),
                backupCount=int(settings.logging.backup_count),
                encoding="utf-8",
            )
        )

    # handler-level filter: records from child loggers skip the parent's own filters
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        handler.addFilter(request_ids)

    logger.setLevel(level)
    logger.handlers = handlers
    logger.propagate = False
    setattr(logger, "_pdrflow_configured", True)
