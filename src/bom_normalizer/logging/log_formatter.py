"""
Log formatters for the BOM normalizer.

``StructuredFormatter`` writes one JSON object per record for log files and
log shippers; ``ColoredFormatter`` highlights the level name on a terminal.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Dict, Any, Optional

from ..error_handling.exceptions import BomNormalizerError

# Attributes every LogRecord carries; anything else was passed through ``extra``
_RECORD_ATTRIBUTES = frozenset(vars(logging.makeLogRecord({}))) | {'message', 'asctime'}


class StructuredFormatter(logging.Formatter):
    """
    JSON formatter for machine-readable run logs.

    A normalizer error attached to the record is written as its ``to_dict()``
    form under ``error``, so the failing stage and context stay queryable.
    Other exceptions are written as a formatted traceback under ``exception``.
    """

    def __init__(self, include_extra: bool = True):
        super().__init__()
        self.include_extra = include_extra

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": f"{record.module}:{record.funcName}:{record.lineno}"
        }

        if record.exc_info:
            error = record.exc_info[1]
            if isinstance(error, BomNormalizerError):
                entry["error"] = error.to_dict()
            else:
                entry["exception"] = self.formatException(record.exc_info)

        if self.include_extra:
            extra = {
                key: value for key, value in vars(record).items()
                if key not in _RECORD_ATTRIBUTES and not key.startswith('_')
            }
            if extra:
                entry["extra"] = extra

        return json.dumps(entry, default=str, ensure_ascii=False)


class ColoredFormatter(logging.Formatter):
    """Console formatter that colors the level name with ANSI codes."""

    LEVEL_COLORS = {
        logging.DEBUG: '\033[36m',
        logging.INFO: '\033[32m',
        logging.WARNING: '\033[33m',
        logging.ERROR: '\033[1;31m',
        logging.CRITICAL: '\033[1;35m'
    }
    RESET = '\033[0m'

    def __init__(self, fmt: Optional[str] = None, datefmt: Optional[str] = None):
        super().__init__(fmt, datefmt)

    def format(self, record: logging.LogRecord) -> str:
        color = self.LEVEL_COLORS.get(record.levelno)
        if color is None:
            return super().format(record)

        # Other handlers share the record
        colored = logging.makeLogRecord(vars(record))
        colored.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(colored)
