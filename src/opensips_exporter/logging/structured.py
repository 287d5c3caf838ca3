"""Log formatters for the exporter.

This module provides a JSON formatter for structured logging and a plain
text formatter for interactive use.
"""

import json
import logging
import traceback
from datetime import datetime, timezone
from typing import Any, Dict, Optional


class StructuredFormatter(logging.Formatter):
    """JSON log formatter.

    Example output:
        {
            "timestamp": "2024-01-15T10:30:45.123456+00:00",
            "level": "DEBUG",
            "logger": "opensips_exporter.collector",
            "message": "Ignoring unknown statistic core:foo",
            "statistic": "core:foo"
        }
    """

    # Attributes of every LogRecord; anything else came in through ``extra``
    STANDARD_FIELDS = {
        "name",
        "msg",
        "args",
        "created",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "module",
        "msecs",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "stack_info",
        "exc_info",
        "exc_text",
        "thread",
        "threadName",
        "taskName",
        "message",
    }

    def __init__(
        self,
        include_source_location: bool = False,
        extra_fields: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__()
        self.include_source_location = include_source_location
        self.extra_fields = extra_fields or {}

    def format(self, record: logging.LogRecord) -> str:
        return json.dumps(self._build_log_entry(record), default=self._json_serializer)

    def _build_log_entry(self, record: logging.LogRecord) -> Dict[str, Any]:
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(
                timespec="microseconds"
            ),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if self.include_source_location:
            entry["source"] = {
                "file": record.filename,
                "function": record.funcName,
                "line": record.lineno,
            }

        if record.exc_info:
            exc_type, exc_value, exc_tb = record.exc_info
            entry["exception"] = {
                "type": exc_type.__name__ if exc_type else None,
                "message": str(exc_value) if exc_value else None,
                "traceback": traceback.format_exception(exc_type, exc_value, exc_tb)
                if exc_tb
                else None,
            }

        entry.update(self.extra_fields)

        for key, value in record.__dict__.items():
            if key not in self.STANDARD_FIELDS and not key.startswith("_"):
                entry[key] = value

        return entry

    def _json_serializer(self, obj: Any) -> str:
        try:
            return str(obj)
        except Exception:
            return f"<unserializable: {type(obj).__name__}>"


class TextFormatter(logging.Formatter):
    """Human-readable text formatter.

    Produces log entries like:
        2024-01-15T10:30:45.123Z INFO     [opensips_exporter.processors.registry] Processor registry ready: core, shmem
    """

    def __init__(self, include_source_location: bool = False) -> None:
        super().__init__()
        self.include_source_location = include_source_location

    def format(self, record: logging.LogRecord) -> str:
        dt = datetime.fromtimestamp(record.created, tz=timezone.utc)
        timestamp = dt.strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"

        parts = [timestamp, record.levelname.ljust(8), f"[{record.name}]"]
        if self.include_source_location:
            parts.append(f"[{record.filename}:{record.lineno}]")
        parts.append(record.getMessage())

        result = " ".join(parts)
        if record.exc_info:
            result += "\n" + self.formatException(record.exc_info)
        return result
