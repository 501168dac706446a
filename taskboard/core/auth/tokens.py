"""Session tokens.

Signed, self-contained JWTs (PyJWT). The token carries the caller's
profile claims and an expiry; it is never stored server-side.
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt

from taskboard.core.exceptions import ConfigurationError, TokenExpired, TokenInvalid

logger = logging.getLogger('taskboard.auth.tokens')

# Only these fields are ever copied into a token
CLAIM_FIELDS = ('id', 'email', 'username', 'firstname', 'lastname', 'age', 'gender')
REQUIRED_CLAIMS = ('id', 'email')


class SessionTokenService:
    """Issue and verify session tokens."""

    def __init__(self, secret_key: str, ttl: timedelta = timedelta(hours=1),
                 algorithm: str = 'HS256'):
        if not secret_key:
            raise ConfigurationError('JWT_SECRET_KEY is required to sign session tokens')
        self._secret_key = secret_key
        self.ttl = ttl
        self.algorithm = algorithm

    def issue(self, claims: Dict[str, Any], ttl: Optional[timedelta] = None,
              now: Optional[datetime] = None) -> str:
        """Sign a token for the given identity claims.

        Fields outside CLAIM_FIELDS (password, password_hash, ...) are dropped.
        """
        missing = [f for f in REQUIRED_CLAIMS if claims.get(f) is None]
        if missing:
            raise ValueError(f"Token claims missing: {', '.join(missing)}")

        issued_at = now or datetime.now(timezone.utc)
        payload = {k: claims[k] for k in CLAIM_FIELDS if claims.get(k) is not None}
        payload['iat'] = issued_at
        payload['exp'] = issued_at + (ttl or self.ttl)
        return jwt.encode(payload, self._secret_key, algorithm=self.algorithm)

    def verify(self, token: str) -> Dict[str, Any]:
        """Return the identity claims of a valid token.

        Raises:
            TokenExpired: signature is valid but the token is past its expiry
            TokenInvalid: bad signature, malformed token or missing claims
        """
        if not token or not isinstance(token, str):
            raise TokenInvalid()
        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self.algorithm],
                options={'require': ['exp', 'iat']},
            )
        except jwt.ExpiredSignatureError:
            raise TokenExpired()
        except jwt.InvalidTokenError as e:
            logger.info(f'Rejected session token: {type(e).__name__}')
            raise TokenInvalid()

        if any(payload.get(f) is None for f in REQUIRED_CLAIMS):
            raise TokenInvalid()
        return {k: payload[k] for k in CLAIM_FIELDS if k in payload}
