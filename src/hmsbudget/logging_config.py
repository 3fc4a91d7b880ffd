"""Structured logging configuration with JSON output and rotation."""

from __future__ import annotations

import json
import logging
import logging.handlers
from datetime import datetime, timezone
from pathlib import Path

from .config import BaseConfig

ROOT_LOGGER = "hmsbudget"


class JSONFormatter(logging.Formatter):
    """Format log records as single-line JSON documents."""

    # LogRecord attributes that are not treated as ``extra`` fields
    _STANDARD_ATTRS = frozenset(
        vars(logging.LogRecord("", 0, "", 0, "", (), None)).keys()
        | {"message", "asctime", "taskName"}
    )

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            exc_type, exc_value, _ = record.exc_info
            payload["exception"] = {
                "type": exc_type.__name__ if exc_type else None,
                "message": str(exc_value) if exc_value else None,
                "traceback": self.formatException(record.exc_info),
            }

        extra = {
            key: value
            for key, value in record.__dict__.items()
            if key not in self._STANDARD_ATTRS
        }
        if extra:
            payload["extra"] = extra

        return json.dumps(payload, default=str)


def setup_logging(config: BaseConfig, *, verbose: bool = False) -> logging.Logger:
    """Attach console and rotating JSON file handlers to the package logger.

    Args:
        config: Configuration providing ``DATA_DIR`` and ``DEV_MODE``.
        verbose: Lower the console threshold to DEBUG.

    Returns:
        The configured ``hmsbudget`` logger.
    """
    logs_dir = Path(config.DATA_DIR) / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler()
    if verbose:
        console_handler.setLevel(logging.DEBUG)
    else:
        console_handler.setLevel(logging.INFO if config.DEV_MODE else logging.WARNING)
    if config.DEV_MODE:
        console_format = "[%(asctime)s] %(levelname)-8s [%(name)s.%(funcName)s:%(lineno)d] %(message)s"
        datefmt = "%H:%M:%S"
    else:
        console_format = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
        datefmt = "%Y-%m-%d %H:%M:%S"
    console_handler.setFormatter(logging.Formatter(fmt=console_format, datefmt=datefmt))
    logger.addHandler(console_handler)

    log_file = logs_dir / "hmsbudget.log"
    file_handler = logging.handlers.RotatingFileHandler(
        filename=log_file,
        maxBytes=5 * 1024 * 1024,
        backupCount=3,
        encoding="utf-8",
    )
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(JSONFormatter())
    logger.addHandler(file_handler)

    logger.debug(
        "Logging initialized",
        extra={"dev_mode": config.DEV_MODE, "log_file": str(log_file)},
    )
    return logger


def get_logger(name: str) -> logging.Logger:
    """Return a child of the package logger, e.g. ``hmsbudget.services.scenarios``."""
    if name.startswith(f"{ROOT_LOGGER}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")
