import json
import logging
import sys
import traceback
from datetime import UTC, datetime
from decimal import Decimal

# Attributes callers may pass through ``extra=`` to tag degraded-path log lines
CONTEXT_FIELDS = ('source', 'route', 'cache_key')


class CustomJSONEncoder(json.JSONEncoder):
    def default(self, o):
        if isinstance(o, datetime):
            return o.isoformat()
        if isinstance(o, Decimal):
            return str(o)
        return super().default(o)


class JSONFormatter(logging.Formatter):
    """
    One JSON object per line, stamped with the record's own creation time.
    """
    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            'timestamp': datetime.fromtimestamp(record.created, UTC).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'function': record.funcName,
            'line': record.lineno,
        }
        for field in CONTEXT_FIELDS:
            if hasattr(record, field):
                log_entry[field] = getattr(record, field)

        if record.exc_info:
            exc_type, exc_value, _ = record.exc_info
            log_entry['exception'] = {
                'type': exc_type.__name__,
                'message': str(exc_value),
                'traceback': traceback.format_exception(*record.exc_info),
            }

        return json.dumps(log_entry, ensure_ascii=False, cls=CustomJSONEncoder)


def setup_logging(level: str = 'INFO', json_output: bool = False) -> None:
    """Route every logger to stdout, either human-readable or as JSON lines."""
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    # httpx logs one INFO line per request
    logging.getLogger('httpx').setLevel(logging.WARNING)

    console_handler = logging.StreamHandler(sys.stdout)
    if json_output:
        console_handler.setFormatter(JSONFormatter())
    else:
        console_format = '%(asctime)s | %(levelname)-8s | %(name)-20s | %(message)s'
        console_handler.setFormatter(logging.Formatter(console_format, datefmt='%H:%M:%S'))
    root_logger.addHandler(console_handler)
