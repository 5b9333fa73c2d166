"""Application-wide logging initialization

IMPORTANT: Call `initialize_logging()` at the top of each handler module
before any other logging is done.

Two sinks are configured:
    - stdout: one JSON document per record (see `JsonFormatter`);
    - diagnostics (optional): `DiagnosticLogHandler`, which appends every
      record to the capped diagnostic log in the data store.

Logging format:
{
    "timestamp": "2025-12-26T12:00:00.000Z",
    "level": "INFO",
    "logger": "localshortener.registry.url_registry",
    "message": "Short URL created.",
    "event": "SHORT_URL_CREATED",
    "shortcode": "abc123"
}
"""

import os
import json
import logging
import logging.config
from datetime import datetime, UTC
from typing import Any, TYPE_CHECKING

from localshortener.utils.constants import LOG_LEVEL_ENV

if TYPE_CHECKING:
    from localshortener.dao.base import DiagnosticLogBaseDAO


# Diagnostic log levels (the sink knows INFO, WARN, ERROR, DEBUG)
DIAGNOSTIC_LEVELS = {
    logging.DEBUG: 'DEBUG',
    logging.INFO: 'INFO',
    logging.WARNING: 'WARN',
    logging.ERROR: 'ERROR',
    logging.CRITICAL: 'ERROR',
}

STANDARD_ATTRS = frozenset(
    {
        'args',
        'asctime',
        'created',
        'exc_info',
        'exc_text',
        'filename',
        'funcName',
        'levelname',
        'levelno',
        'lineno',
        'message',
        'module',
        'msecs',
        'msg',
        'name',
        'pathname',
        'process',
        'processName',
        'relativeCreated',
        'stack_info',
        'thread',
        'threadName',
        'taskName',
    }
)


def _timestamp(record: logging.LogRecord) -> str:
    # fmt: off
    return datetime.fromtimestamp(record.created, tz=UTC) \
                   .isoformat(timespec='milliseconds') \
                   .replace('+00:00', 'Z')
    # fmt: on


def record_extras(record: logging.LogRecord) -> dict[str, Any]:
    """Return the `extra` fields attached to a LogRecord"""
    return {key: value for key, value in record.__dict__.items() if key not in STANDARD_ATTRS}


class JsonFormatter(logging.Formatter):
    """JSON formatter that includes LogRecord extras"""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            'timestamp': _timestamp(record),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }
        log.update(record_extras(record))

        if record.exc_info:
            log['exception'] = self.formatException(record.exc_info)

        return json.dumps(log, default=str)


class DiagnosticLogHandler(logging.Handler):
    """Forward log records to the diagnostic log store.

    Each record becomes an entry:
        {"timestamp", "level", "logger", "message", "data"}
    where "data" holds the record's `extra` fields (or None).

    Failures of the store are reported through `Handler.handleError()` and
    never propagate to the code that logged.
    """

    def __init__(self, log_dao: 'DiagnosticLogBaseDAO', level: int | str = logging.NOTSET):
        super().__init__(level=level)
        self.log_dao = log_dao

    def to_entry(self, record: logging.LogRecord) -> dict[str, Any]:
        extras = record_extras(record)
        data = json.loads(json.dumps(extras, default=str)) if extras else None
        return {
            'timestamp': _timestamp(record),
            'level': DIAGNOSTIC_LEVELS.get(record.levelno, record.levelname),
            'logger': record.name,
            'message': record.getMessage(),
            'data': data,
        }

    def emit(self, record: logging.LogRecord) -> None:
        try:
            self.log_dao.append(self.to_entry(record))
        except Exception:
            self.handleError(record)


def initialize_logging(log_dao: 'DiagnosticLogBaseDAO | None' = None) -> None:
    log_level = os.getenv(LOG_LEVEL_ENV, 'INFO').upper()
    handlers = {
        'stdout': {
            'class': 'logging.StreamHandler',
            'formatter': 'json',
            'stream': 'ext://sys.stdout',
        }
    }
    if log_dao is not None:
        handlers['diagnostics'] = {
            '()': DiagnosticLogHandler,
            'log_dao': log_dao,
        }

    logging.config.dictConfig(
        {
            'version': 1,
            'disable_existing_loggers': False,
            'formatters': {
                'json': {
                    '()': JsonFormatter,
                }
            },
            'handlers': handlers,
            'root': {
                'level': log_level,
                'handlers': ['stdout'],
            },
            'loggers': {
                'localshortener': {
                    'level': log_level,
                    'handlers': ['diagnostics'] if log_dao is not None else [],
                    'propagate': True,
                }
            },
        }
    )
