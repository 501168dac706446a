"""Auth services package."""
from .auth_service import AuthService, LoginResult

__all__ = ['AuthService', 'LoginResult']
