"""
Logging setup for Taskboard.

Records emitted while a request is being served are tagged with the
request line and the authenticated user id, so ownership rejections and
login failures can be traced back to a caller. Cookies and request bodies
are never attached.

Production (PRODUCTION=true) writes one JSON object per line; development
writes a coloured single-line format.
"""

import sys
import json
import logging
from datetime import datetime, timezone

from flask import g, has_request_context, request

REQUEST_FIELDS = ('method', 'path', 'remote_addr', 'user_id')


class RequestContextFilter(logging.Filter):
    """Attach request fields to records logged inside a request."""

    def filter(self, record: logging.LogRecord) -> bool:
        if has_request_context():
            record.method = request.method
            record.path = request.path
            record.remote_addr = request.remote_addr
            # Set by Flask-Login once current_user has been resolved; reading
            # it here never triggers a token check
            user = g.get('_login_user')
            record.user_id = user.id if user is not None and user.is_authenticated else None
        return True


class JSONFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            'ts': datetime.now(timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'msg': record.getMessage(),
        }
        for field in REQUEST_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                entry[field] = value

        if record.exc_info:
            entry['exc'] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


class DevelopmentFormatter(logging.Formatter):
    """Coloured single-line output for a terminal."""

    LEVEL_COLORS = {
        logging.DEBUG: '\033[36m',
        logging.INFO: '\033[32m',
        logging.WARNING: '\033[33m',
        logging.ERROR: '\033[31m',
        logging.CRITICAL: '\033[35m',
    }
    RESET = '\033[0m'

    def format(self, record: logging.LogRecord) -> str:
        color = self.LEVEL_COLORS.get(record.levelno, '')
        line = (f'{color}{datetime.now():%H:%M:%S} {record.levelname[:4]}{self.RESET} '
                f'{record.name}: {record.getMessage()}')

        method = getattr(record, 'method', None)
        if method:
            who = getattr(record, 'user_id', None)
            line += f'  [{method} {record.path}' + (f' user={who}]' if who is not None else ']')

        if record.exc_info:
            line += '\n' + self.formatException(record.exc_info)
        return line


def setup_logging(level: str = 'INFO', json_format: bool = False,
                  logger_name: str = 'taskboard') -> logging.Logger:
    """Configure the ``taskboard`` logger tree and return its root.

    Safe to call more than once (each app built in a test process calls it);
    the previous handler is replaced rather than duplicated.
    """
    logger = logging.getLogger(logger_name)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(RequestContextFilter())
    handler.setFormatter(JSONFormatter() if json_format else DevelopmentFormatter())
    logger.addHandler(handler)
    logger.propagate = False
    return logger
