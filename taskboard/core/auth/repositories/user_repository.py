"""User Repository - Data access layer for user operations.

This module handles all record-store operations related to users,
including authentication and password updates.
"""
from typing import Optional, Dict, Any
from datetime import datetime, timezone

from taskboard.core.base_repository import BaseRepository, _store_call
from taskboard.core.auth.passwords import PasswordHasher

PROFILE_FIELDS = ('id', 'username', 'firstname', 'lastname', 'email', 'age', 'gender')


def public_profile(user: Dict[str, Any]) -> Dict[str, Any]:
    """Strip the password hash (and anything else private) from a user record."""
    return {k: user.get(k) for k in PROFILE_FIELDS}


class UserRepository(BaseRepository):
    """Repository for user data access operations."""

    collection = 'users'

    def __init__(self, store, hasher: PasswordHasher = None):
        super().__init__(store)
        self.hasher = hasher or PasswordHasher()

    def get_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        """Get a user by email address."""
        return self.find_by(email=email)

    def email_exists(self, email: str) -> bool:
        return self.count(email=email) > 0

    @_store_call
    def save(self, email: str, password: str, username: str = None,
             firstname: str = None, lastname: str = None,
             age: int = None, gender: str = None) -> Dict[str, Any]:
        """Save a new user with a hashed password. Returns the stored record."""
        return self.store.insert(self.collection, {
            'username': username,
            'firstname': firstname,
            'lastname': lastname,
            'email': email,
            'password_hash': self.hasher.hash(password),
            'age': age,
            'gender': gender,
            'created_at': datetime.now(timezone.utc).isoformat(),
        })

    def update_password(self, user_id: int, password: str) -> bool:
        """Update the password for a user."""
        return self.update(user_id, {'password_hash': self.hasher.hash(password)}) is not None

    # --- Authentication Methods ---

    def check_password(self, user: Dict[str, Any], password: str) -> bool:
        return self.hasher.verify(password, user.get('password_hash'))
