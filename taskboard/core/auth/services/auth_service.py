"""Auth Service - Business logic for registration, login and profile.

Routes call these methods instead of touching the repositories directly.
Failures are raised as taskboard.core.exceptions errors.
"""
import logging
from dataclasses import dataclass
from typing import Optional, Dict, Any

from taskboard.core.exceptions import InvalidInput, Conflict, InvalidCredentials, NotFound
from ..guard import resolve_fresh_identity
from ..repositories.user_repository import UserRepository, public_profile
from ..tokens import SessionTokenService

logger = logging.getLogger('taskboard.auth')


@dataclass
class LoginResult:
    """Result of a successful login."""
    token: str
    user: Dict[str, Any]


def _optional_text(data, field):
    value = data.get(field)
    if value is None:
        return None
    if not isinstance(value, str):
        raise InvalidInput(f'{field} must be text')
    return value.strip() or None


def _optional_age(value) -> Optional[int]:
    if value is None or value == '':
        return None
    if isinstance(value, bool):
        raise InvalidInput('age must be a number')
    if isinstance(value, float) and not value.is_integer():
        raise InvalidInput('age must be a whole number')
    try:
        return int(value)
    except (TypeError, ValueError):
        raise InvalidInput('age must be a number')


class AuthService:
    """Service for authentication-related business logic."""

    def __init__(self, user_repo: UserRepository, token_service: SessionTokenService):
        self.user_repo = user_repo
        self.token_service = token_service

    def register(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Create a user account.

        Args:
            data: username/firstname/lastname, email, password, age, gender

        Returns:
            The public profile of the new user (no password hash)
        """
        password = data.get('password')
        if not password or not isinstance(password, str):
            raise InvalidInput('Password is required and must be text')

        email = data.get('email')
        if not email or not isinstance(email, str) or not email.strip():
            raise InvalidInput('Email is required')
        email = email.strip()

        if self.user_repo.email_exists(email):
            logger.info('Registration rejected: email already registered')
            raise Conflict('User already exists')

        user = self.user_repo.save(
            email=email,
            password=password,
            username=_optional_text(data, 'username'),
            firstname=_optional_text(data, 'firstname'),
            lastname=_optional_text(data, 'lastname'),
            age=_optional_age(data.get('age')),
            gender=_optional_text(data, 'gender'),
        )
        logger.info(f"Registered user {user['id']}")
        return public_profile(user)

    def login(self, email: str, password: str) -> LoginResult:
        """Authenticate by email and password and issue a session token."""
        if not isinstance(email, str) or not isinstance(password, str):
            raise InvalidInput('Email and password are required')

        user = self.user_repo.get_by_email(email.strip())
        if not user:
            logger.info('Login failed: unknown email')
            raise NotFound('User not found', status_code=400)

        if not self.user_repo.check_password(user, password):
            logger.info(f"Login failed: wrong password for user {user['id']}")
            raise InvalidCredentials('Incorrect password')

        profile = public_profile(user)
        token = self.token_service.issue(profile)
        logger.info(f"User {user['id']} logged in")
        return LoginResult(token=token, user=profile)

    def get_current_user(self, identity) -> Dict[str, Any]:
        """Live profile of the caller, looked up by the email in the token."""
        return public_profile(resolve_fresh_identity(self.user_repo, identity))

    def change_password(self, identity, current_password: str, new_password: str) -> bool:
        """Change the caller's password after re-checking the current one."""
        if not new_password or not isinstance(new_password, str):
            raise InvalidInput('New password is required and must be text')

        user = resolve_fresh_identity(self.user_repo, identity)
        if not isinstance(current_password, str) or not self.user_repo.check_password(user, current_password):
            raise InvalidCredentials('Current password is incorrect')

        self.user_repo.update_password(user['id'], new_password)
        logger.info(f"User {user['id']} changed password")
        return True
