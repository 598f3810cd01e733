"""
Logging setup for the FizzBuzz CLI.

Result lines go to a dedicated "fizzbuzz" logger on stdout, either as
single-line JSON records or as plain "LEVEL - message" text.
"""

import json
import logging
import sys
from typing import Any, Dict, Optional, TextIO

LOGGER_NAME = 'fizzbuzz'
TEXT_FORMAT = '%(levelname)s - %(message)s'

# Extra record attributes copied into JSON output when present
STRUCTURED_FIELDS = ('number', 'upper_limit', 'adapter', 'error')


class JsonFormatter(logging.Formatter):
    """Format log records as single-line JSON without timestamps."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            'level': record.levelname,
            'msg': record.getMessage(),
        }

        for field in STRUCTURED_FIELDS:
            if hasattr(record, field):
                log_data[field] = getattr(record, field)

        if record.exc_info:
            log_data['traceback'] = self.formatException(record.exc_info)

        return json.dumps(log_data, separators=(',', ':'), default=str)


def configure_logging(level: str = 'INFO', fmt: str = 'json', stream: Optional[TextIO] = None) -> logging.Logger:
    """
    Configure the root and "fizzbuzz" loggers with one stdout handler.

    Library modules log through their own module loggers, which propagate to
    the same handler.

    Args:
        level: Logging level name
        fmt: "json" or "text"
        stream: Output stream (defaults to stdout)

    Returns:
        logging.Logger: The "fizzbuzz" logger to hand to the pipeline runner
    """
    handler = logging.StreamHandler(stream or sys.stdout)
    handler.set_name(LOGGER_NAME)
    if fmt == 'json':
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))

    # Replace only a handler installed by a previous call
    root = logging.getLogger()
    for existing in list(root.handlers):
        if existing.get_name() == LOGGER_NAME:
            root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    return logger
