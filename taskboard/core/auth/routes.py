"""Auth module routes.

Registration, login, logout and current-user profile.
"""
import logging

from flask import current_app, jsonify, request
from flask_login import current_user

from . import auth_bp
from .guard import token_required
from taskboard.core.utils.api_helpers import (
    camelize, error_response, get_json_or_error, handle_api_errors,
)

logger = logging.getLogger('taskboard.auth.routes')


def _ext():
    return current_app.extensions['taskboard']


def _throttled(action):
    """Return an error response if the client exceeded the login rate limit."""
    config = _ext().config
    allowed, retry_after = _ext().auth_limiter.is_allowed(
        f'{action}:{request.remote_addr}',
        max_requests=config.LOGIN_RATE_LIMIT,
        window_seconds=config.LOGIN_RATE_WINDOW_SECONDS)
    if not allowed:
        return error_response(f'Too many attempts. Try again in {retry_after} seconds.', 429)
    return None


def _set_session_cookie(response, token):
    config = _ext().config
    response.set_cookie(
        config.SESSION_COOKIE_NAME,
        token,
        max_age=config.TOKEN_TTL_HOURS * 3600,
        httponly=True,
        secure=config.COOKIE_SECURE,
        samesite=config.COOKIE_SAMESITE,
    )
    return response


# ============== AUTHENTICATION ROUTES ==============

@auth_bp.route('/register', methods=['POST'])
@handle_api_errors
def register():
    """Create a user account."""
    limited = _throttled('register')
    if limited:
        return limited

    data, error = get_json_or_error()
    if error:
        return error

    _ext().auth_service.register(data)
    return jsonify({'success': True, 'message': 'User registered successfully'}), 200


@auth_bp.route('/login', methods=['POST'])
@handle_api_errors
def login():
    """Check credentials, set the session cookie and return the token."""
    limited = _throttled('login')
    if limited:
        return limited

    data, error = get_json_or_error()
    if error:
        return error

    result = _ext().auth_service.login(data.get('email'), data.get('password'))
    response = jsonify({'success': True, 'token': result.token, 'user': camelize(result.user)})
    return _set_session_cookie(response, result.token)


@auth_bp.route('/logout', methods=['POST'])
def logout():
    """Clear the session cookie. Always succeeds."""
    config = _ext().config
    if current_user.is_authenticated:
        logger.info(f'User {current_user.id} logged out')
    response = jsonify({'success': True, 'message': 'Logged out'})
    response.delete_cookie(
        config.SESSION_COOKIE_NAME,
        httponly=True,
        secure=config.COOKIE_SECURE,
        samesite=config.COOKIE_SAMESITE,
    )
    return response


# ============== PROFILE ROUTES ==============

@auth_bp.route('/user', methods=['GET'])
@handle_api_errors
@token_required
def get_user():
    """Live profile of the logged-in user."""
    return jsonify(camelize(_ext().auth_service.get_current_user(current_user)))


@auth_bp.route('/user/password', methods=['PUT'])
@handle_api_errors
@token_required
def change_password():
    """Change the logged-in user's password."""
    data, error = get_json_or_error()
    if error:
        return error

    _ext().auth_service.change_password(
        current_user,
        data.get('currentPassword'),
        data.get('newPassword'),
    )
    return jsonify({'success': True, 'message': 'Password updated'})
