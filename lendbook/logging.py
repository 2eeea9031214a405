"""Logging setup driven by ``LendbookConfig``.

Store and validation code attach loan context (ids, balances, statuses)
through ``extra={"extra": {...}}``. Both formatters render that context:
the standard one as trailing ``key=value`` pairs, the JSON one as
top-level fields.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from lendbook.config import LendbookConfig
from lendbook.exceptions import ConfigurationError
from lendbook.serialization import serialize_value


def _loan_context(record: logging.LogRecord) -> dict[str, Any]:
    return serialize_value(getattr(record, "extra", None) or {})


class KeyValueFormatter(logging.Formatter):
    """Human-readable lines with loan context appended as key=value pairs."""

    def __init__(self) -> None:
        super().__init__(
            fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = _loan_context(record)
        if not context:
            return line
        pairs = " ".join(f"{key}={value}" for key, value in context.items())
        head, sep, tail = line.partition("\n")
        return f"{head} | {pairs}{sep}{tail}"


class JsonFormatter(logging.Formatter):
    """JSON log formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        log_data.update(_loan_context(record))

        return json.dumps(log_data)


FORMATTERS: dict[str, type[logging.Formatter]] = {
    "standard": KeyValueFormatter,
    "json": JsonFormatter,
}


def setup_logging(
    config: LendbookConfig | None = None,
    level: str | None = None,
    format_type: str | None = None,
) -> None:
    """Configure logging for lendbook.

    Parameters
    ----------
    config : LendbookConfig | None
        Source of the log level and format; defaults apply when omitted.
    level : str | None
        Overrides ``config.log_level``. Unknown names fall back to INFO.
    format_type : str | None
        Overrides ``config.log_format``: "standard" or "json".

    Raises
    ------
    ConfigurationError
        If the format is not one of ``FORMATTERS``.
    """
    config = config or LendbookConfig()
    level = level or config.log_level
    format_type = format_type or config.log_format

    if format_type not in FORMATTERS:
        raise ConfigurationError(f"Unknown log format: {format_type}")

    log_level = getattr(logging, level.upper(), logging.INFO)
    formatter = FORMATTERS[format_type]()

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    logging.getLogger("lendbook").setLevel(log_level)

    # Faker logs locale lookups at DEBUG
    logging.getLogger("faker").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Get a logger with the given name."""
    return logging.getLogger(name)
