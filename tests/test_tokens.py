"""Unit tests for SessionTokenService.

Tests for core.auth.tokens:
- construction fails fast without a secret
- issue (claims whitelist, password never included, ttl)
- verify (valid, expired, tampered, wrong key, garbage)
"""
from datetime import datetime, timedelta, timezone

import jwt
import pytest

from taskboard.core.auth.tokens import SessionTokenService
from taskboard.core.exceptions import ConfigurationError, Forbidden, TokenExpired, TokenInvalid

SECRET = 'unit-test-secret-key-that-is-long-enough'

CLAIMS = {
    'id': 7,
    'email': 'a@x.com',
    'firstname': 'Ana',
    'lastname': 'Pop',
    'age': 28,
    'gender': 'female',
}


@pytest.fixture
def service():
    return SessionTokenService(SECRET, ttl=timedelta(hours=1))


class TestConstruction:

    @pytest.mark.parametrize('secret', [None, ''])
    def test_missing_secret_fails_fast(self, secret):
        with pytest.raises(ConfigurationError):
            SessionTokenService(secret)


class TestIssue:

    def test_round_trip_claims(self, service):
        claims = service.verify(service.issue(CLAIMS))
        assert claims == CLAIMS

    def test_password_never_in_token(self, service):
        token = service.issue(dict(CLAIMS, password='pw1', password_hash='pbkdf2:...'))
        payload = jwt.decode(token, SECRET, algorithms=['HS256'])
        assert 'password' not in payload
        assert 'password_hash' not in payload

    def test_expiry_follows_ttl(self, service):
        now = datetime.now(timezone.utc).replace(microsecond=0)
        token = service.issue(CLAIMS, now=now)
        payload = jwt.decode(token, SECRET, algorithms=['HS256'])
        assert payload['exp'] - payload['iat'] == 3600

    def test_ttl_override(self, service):
        now = datetime.now(timezone.utc).replace(microsecond=0)
        token = service.issue(CLAIMS, ttl=timedelta(hours=24), now=now)
        payload = jwt.decode(token, SECRET, algorithms=['HS256'])
        assert payload['exp'] - payload['iat'] == 24 * 3600

    def test_missing_identity_rejected(self, service):
        with pytest.raises(ValueError):
            service.issue({'firstname': 'Nobody'})


class TestVerify:

    def test_expired_token(self, service):
        """A 1h token checked two hours later is expired, not invalid."""
        issued = datetime.now(timezone.utc) - timedelta(hours=2)
        token = service.issue(CLAIMS, now=issued)
        with pytest.raises(TokenExpired):
            service.verify(token)

    def test_tampered_payload(self, service):
        token = service.issue(CLAIMS)
        header, payload, signature = token.split('.')
        forged = jwt.encode(dict(CLAIMS, id=99, exp=9999999999, iat=0), 'other-key-of-sufficient-length!!',
                            algorithm='HS256').split('.')[1]
        with pytest.raises(TokenInvalid):
            service.verify(f'{header}.{forged}.{signature}')

    def test_tampered_signature(self, service):
        token = service.issue(CLAIMS)
        flipped = token[:-2] + ('AA' if not token.endswith('AA') else 'BB')
        with pytest.raises(TokenInvalid):
            service.verify(flipped)

    def test_signed_with_other_key(self, service):
        other = SessionTokenService('a-completely-different-signing-key!!')
        with pytest.raises(TokenInvalid):
            service.verify(other.issue(CLAIMS))

    @pytest.mark.parametrize('token', ['', None, 'garbage', 'a.b.c'])
    def test_malformed(self, service, token):
        with pytest.raises(TokenInvalid):
            service.verify(token)

    def test_token_without_expiry_is_invalid(self, service):
        token = jwt.encode({'id': 1, 'email': 'a@x.com'}, SECRET, algorithm='HS256')
        with pytest.raises(TokenInvalid):
            service.verify(token)

    def test_both_failures_are_forbidden(self):
        assert issubclass(TokenExpired, Forbidden)
        assert issubclass(TokenInvalid, Forbidden)
        assert TokenExpired().message != TokenInvalid().message
