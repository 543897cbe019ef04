"""
Logging setup for the Content Intelligence Dispatcher.

JSON lines for log files and aggregation, colored text for terminals.
Per-request context (request id, category, caller, result origin)
travels through ``extra=`` and is kept by both formatters.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict, Optional

# Attributes every LogRecord carries; anything else came in through `extra`.
_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", (), None)).keys()
) | {"message", "asctime"}

TEXT_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def record_context(record: logging.LogRecord) -> Dict[str, Any]:
    """Fields attached to a record through ``extra=``."""
    return {
        key: value
        for key, value in vars(record).items()
        if key not in _RESERVED_ATTRS and not key.startswith("_")
    }


class JSONFormatter(logging.Formatter):
    """One JSON object per line; extra fields go under "context"."""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        context = record_context(record)
        if context:
            entry["context"] = context
        return json.dumps(entry, default=str)


class ColoredFormatter(logging.Formatter):
    """Terminal formatter that colors the level name."""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        # Other handlers format the same record; restore the plain name
        plain = record.levelname
        record.levelname = f"{self.COLORS.get(plain, '')}{plain}{self.RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname = plain


def setup_logging(
    level: str = "INFO",
    log_format: str = "json",
    log_file: Optional[str] = None,
    max_bytes: int = 10485760,
    backup_count: int = 5,
    console_enabled: bool = True,
    colored: bool = True,
) -> None:
    """
    Replace the root logger's handlers.

    Args:
        level: Root log level name.
        log_format: "json" or "text" for the console handler.
        log_file: Optional rotating log file (always JSON).
        max_bytes: Rotation size of the log file.
        backup_count: Rotated files to keep.
        console_enabled: Attach a stderr handler.
        colored: Color level names in text console output.
    """
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper()))
    root.handlers = []

    if log_format == "json":
        console_formatter: logging.Formatter = JSONFormatter()
    elif colored:
        console_formatter = ColoredFormatter(TEXT_FORMAT, DATE_FORMAT)
    else:
        console_formatter = logging.Formatter(TEXT_FORMAT, DATE_FORMAT)

    # stderr keeps JSON reports on stdout machine-readable
    if console_enabled:
        console = logging.StreamHandler(sys.stderr)
        console.setFormatter(console_formatter)
        root.addHandler(console)

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        rotating = RotatingFileHandler(log_file, maxBytes=max_bytes, backupCount=backup_count)
        rotating.setFormatter(JSONFormatter())
        root.addHandler(rotating)

    # The OpenAI SDK logs every HTTP request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)


def setup_logging_from_config(section: Dict[str, Any], verbose: bool = False) -> None:
    """Apply the 'logging' config section; `verbose` forces DEBUG."""
    setup_logging(
        level="DEBUG" if verbose else section.get("level", "INFO"),
        log_format=section.get("format", "json"),
        log_file=section.get("file"),
        colored=sys.stderr.isatty(),
    )


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


class LoggerAdapter(logging.LoggerAdapter):
    """
    Adapter that stamps a fixed context onto every record.

    Call-site ``extra=`` values are merged over the fixed context.
    """

    def process(self, msg: str, kwargs: Dict[str, Any]) -> tuple:
        merged = dict(self.extra)
        merged.update(kwargs.get("extra", {}))
        kwargs["extra"] = merged
        return msg, kwargs


def create_logger_with_context(name: str, context: Dict[str, Any]) -> LoggerAdapter:
    """
    Logger whose records all carry `context`.

    Example:
        log = create_logger_with_context("dispatcher", {"category": "news"})
        log.info("Dispatching request")
    """
    return LoggerAdapter(get_logger(name), context)
