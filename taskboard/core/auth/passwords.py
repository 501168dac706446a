"""Password hashing.

Thin adapter over werkzeug.security. The hash method is fixed and
cost-factored; werkzeug salts every hash randomly, so the same plaintext
never hashes to the same string twice.
"""
import logging

from werkzeug.security import generate_password_hash, check_password_hash

logger = logging.getLogger('taskboard.auth.passwords')

DEFAULT_HASH_METHOD = 'pbkdf2:sha256:600000'
SALT_LENGTH = 16


class PasswordHasher:
    """Hash and verify passwords."""

    def __init__(self, method: str = DEFAULT_HASH_METHOD):
        self.method = method

    def hash(self, plaintext: str) -> str:
        return generate_password_hash(plaintext, method=self.method, salt_length=SALT_LENGTH)

    def verify(self, plaintext: str, password_hash: str) -> bool:
        """Check a password against a stored hash.

        A missing or malformed hash counts as a failed verification.
        """
        if not isinstance(plaintext, str) or not isinstance(password_hash, str) or not password_hash:
            return False
        try:
            return check_password_hash(password_hash, plaintext)
        except (ValueError, TypeError) as e:
            logger.warning(f'Unverifiable password hash: {type(e).__name__}')
            return False
