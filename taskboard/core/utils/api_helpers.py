"""Shared API utilities — error helpers, request validation, serialization, rate limiter."""
import re
import time
import logging
from collections import defaultdict
from functools import wraps

from flask import jsonify, request

from taskboard.core.exceptions import TaskboardError

logger = logging.getLogger('taskboard.api')


# ============== Request Validation ==============

def get_json_or_error():
    """Get JSON object from request body.

    Returns (data, error_response) tuple. Caller pattern:
        data, error = get_json_or_error()
        if error:
            return error
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return None, error_response('Invalid or missing JSON body', 400)
    return data, None


# ============== Error Handling ==============

def error_response(message, status_code=400):
    return jsonify({'success': False, 'error': message}), status_code


def safe_error_response(e, status_code=500):
    """Return error response without leaking store internals.

    - TaskboardError: its message and status code (safe to expose)
    - Everything else: logs full exception, returns generic message
    """
    if isinstance(e, TaskboardError) and e.status_code < 500:
        return error_response(e.message, e.status_code)

    logger.exception('Unhandled error in API route')
    return error_response('An internal error occurred', status_code)


def handle_api_errors(f):
    """Render exceptions raised by a route as the JSON error envelope."""
    @wraps(f)
    def decorated(*args, **kwargs):
        try:
            return f(*args, **kwargs)
        except Exception as e:
            return safe_error_response(e)
    return decorated


# ============== Serialization ==============

_SNAKE = re.compile(r'_([a-z])')


def camelize(record):
    """Render a stored record (snake_case keys) as an API payload (camelCase)."""
    if isinstance(record, list):
        return [camelize(r) for r in record]
    if not isinstance(record, dict):
        return record
    return {_SNAKE.sub(lambda m: m.group(1).upper(), k): camelize(v) for k, v in record.items()}


# ============== Rate Limiter ==============

class RateLimiter:
    """Simple in-memory rate limiter.

    Per-process state: each worker counts separately.
    """

    def __init__(self):
        self._requests = defaultdict(list)

    def is_allowed(self, key, max_requests=10, window_seconds=60):
        """Check if request is allowed.

        Args:
            key: String identifier (user_id, IP address, etc.)
            max_requests: Max requests per window
            window_seconds: Window duration in seconds

        Returns:
            (is_allowed: bool, retry_after: int) tuple
        """
        now = time.time()
        window_start = now - window_seconds

        self._requests[key] = [ts for ts in self._requests[key] if ts > window_start]

        if len(self._requests[key]) >= max_requests:
            oldest = min(self._requests[key])
            retry_after = int(oldest + window_seconds - now) + 1
            return False, max(1, retry_after)

        self._requests[key].append(now)
        return True, 0
