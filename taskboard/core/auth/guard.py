"""Request guard.

Flask-Login resolves ``current_user`` through a request loader that reads
the session token from the cookie store and verifies it. Nothing is looked
up in the record store: the identity is whatever the token claims say.
"""
import logging
from functools import wraps

from flask import g
from flask_login import LoginManager, current_user

from taskboard.core.exceptions import Forbidden, NotFound, Unauthenticated
from .models import User

logger = logging.getLogger('taskboard.auth.guard')


def init_guard(app, token_service, cookie_name):
    """Install the cookie-token request loader on the app."""
    login_manager = LoginManager()
    login_manager.init_app(app)
    login_manager.session_protection = None

    @login_manager.request_loader
    def load_user_from_cookie(req):
        token = req.cookies.get(cookie_name)
        if not token:
            return None
        try:
            claims = token_service.verify(token)
        except Forbidden as e:
            g.auth_error = e
            return None
        return User(claims)

    return login_manager


def token_required(f):
    """Reject the request unless it carries a valid session token.

    No cookie -> Unauthenticated (401). Expired or invalid token ->
    the Forbidden subclass raised by verification (403).
    """
    @wraps(f)
    def decorated(*args, **kwargs):
        if not current_user.is_authenticated:
            error = g.get('auth_error')
            if error is not None:
                logger.info(f'Rejected request with bad session token: {error.message}')
                raise error
            raise Unauthenticated()
        return f(*args, **kwargs)
    return decorated


def resolve_fresh_identity(user_repo, identity):
    """Re-read the caller's live user record, for when stale claims are not enough."""
    user = user_repo.get_by_email(identity.email)
    if not user:
        raise NotFound('User not found', status_code=400)
    return user
