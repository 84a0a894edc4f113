"""
Logging setup for the discount engine.

Modules log through `logging.getLogger(__name__)`; applications call
`configure_logging` once at startup:

    from pos_discount.logging import configure_logging

    configure_logging(level=logging.DEBUG, json_format=True)

Structured fields go in `extra={"data": {...}}` and come out under a "data"
key in JSON output. Engine summaries use it for subtotal, discount total and
final price.
"""
from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Optional, Union

CONSOLE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class JsonFormatter(logging.Formatter):
    """One JSON object per record, for files and log collectors."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        data = getattr(record, "data", None)
        if data:
            entry["data"] = data
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        # Decimal amounts are written as strings
        return json.dumps(entry, default=str, ensure_ascii=False)


def _resolve_level(level: Union[int, str]) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        raise ValueError(f"unknown log level: {level}")
    return resolved


def _handler(handler: logging.Handler, formatter: logging.Formatter, level: int) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def configure_logging(
    level: Union[int, str] = logging.INFO,
    json_format: bool = False,
    log_file: Optional[str] = None,
) -> None:
    """Route engine logs to the console and, optionally, a JSON log file.

    Args:
        level: Logging level, as a number or a name such as "debug"
        json_format: Write console records as JSON instead of plain text
        log_file: Also append JSON records to this file
    """
    level = _resolve_level(level)
    console_formatter = JsonFormatter() if json_format else logging.Formatter(CONSOLE_FORMAT)

    handlers = [_handler(logging.StreamHandler(), console_formatter, level)]
    if log_file:
        handlers.append(_handler(logging.FileHandler(log_file), JsonFormatter(), level))

    logging.basicConfig(level=level, handlers=handlers, force=True)


__all__ = [
    "configure_logging",
    "JsonFormatter",
]
