"""Taskboard Core Authentication Module.

Handles registration, login/logout and the session-token guard.
"""
from flask import Blueprint

auth_bp = Blueprint('auth', __name__)

from . import routes  # noqa: E402, F401
