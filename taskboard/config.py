"""
Taskboard Configuration

Environment variables and settings for the application.
"""

import os
from dataclasses import dataclass
from typing import Optional


def _env_bool(name: str, default: str) -> bool:
    return os.environ.get(name, default).lower() == 'true'


@dataclass
class Config:
    """Application configuration settings."""

    # Session tokens
    JWT_SECRET_KEY: Optional[str] = None
    JWT_ALGORITHM: str = 'HS256'
    TOKEN_TTL_HOURS: int = 1              # 24 is the long-session policy

    # Cookie transport
    SESSION_COOKIE_NAME: str = 'token'
    COOKIE_SECURE: bool = True
    COOKIE_SAMESITE: str = 'None'         # Cross-site capable

    # Record store
    STORE_BACKEND: str = 'postgres'       # postgres | json
    DATABASE_URL: Optional[str] = None
    DB_POOL_MIN_CONN: int = 1
    DB_POOL_MAX_CONN: int = 10
    JSON_STORE_PATH: str = 'db.json'

    # Resource model policies
    OWNERSHIP_POLICY: str = 'enforced'    # enforced | unenforced
    SORT_ORDER_POLICY: str = 'sequence'   # sequence | count

    # Login throttling (per client address)
    LOGIN_RATE_LIMIT: int = 10
    LOGIN_RATE_WINDOW_SECONDS: int = 300

    # Logging
    LOG_LEVEL: str = 'INFO'
    PRODUCTION: bool = False

    @classmethod
    def from_env(cls) -> 'Config':
        """Load configuration from environment variables."""
        return cls(
            JWT_SECRET_KEY=os.environ.get('JWT_SECRET_KEY'),
            JWT_ALGORITHM=os.environ.get('JWT_ALGORITHM', 'HS256'),
            TOKEN_TTL_HOURS=int(os.environ.get('TOKEN_TTL_HOURS', '1')),
            SESSION_COOKIE_NAME=os.environ.get('SESSION_COOKIE_NAME', 'token'),
            COOKIE_SECURE=_env_bool('COOKIE_SECURE', 'true'),
            COOKIE_SAMESITE=os.environ.get('COOKIE_SAMESITE', 'None'),
            STORE_BACKEND=os.environ.get('STORE_BACKEND', 'postgres').lower(),
            DATABASE_URL=os.environ.get('DATABASE_URL'),
            DB_POOL_MIN_CONN=int(os.environ.get('DB_POOL_MIN_CONN', '1')),
            DB_POOL_MAX_CONN=int(os.environ.get('DB_POOL_MAX_CONN', '10')),
            JSON_STORE_PATH=os.environ.get('JSON_STORE_PATH', 'db.json'),
            OWNERSHIP_POLICY=os.environ.get('OWNERSHIP_POLICY', 'enforced').lower(),
            SORT_ORDER_POLICY=os.environ.get('SORT_ORDER_POLICY', 'sequence').lower(),
            LOGIN_RATE_LIMIT=int(os.environ.get('LOGIN_RATE_LIMIT', '10')),
            LOGIN_RATE_WINDOW_SECONDS=int(os.environ.get('LOGIN_RATE_WINDOW_SECONDS', '300')),
            LOG_LEVEL=os.environ.get('LOG_LEVEL', 'INFO'),
            PRODUCTION=_env_bool('PRODUCTION', 'false'),
        )
