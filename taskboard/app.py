"""Taskboard application factory."""
import os
from dataclasses import dataclass
from datetime import timedelta

from flask import Flask, jsonify

from taskboard.config import Config
from taskboard.core.utils.logging_config import setup_logging
from taskboard.core.exceptions import ConfigurationError, TaskboardError
from taskboard.core.record_store import RecordStore, create_store
from taskboard.core.auth.guard import init_guard
from taskboard.core.auth.passwords import PasswordHasher
from taskboard.core.auth.tokens import SessionTokenService
from taskboard.core.auth.repositories import UserRepository
from taskboard.core.auth.services import AuthService
from taskboard.core.utils.api_helpers import RateLimiter, error_response, safe_error_response
from taskboard.boards.policies import OwnershipPolicy, SortOrderPolicy
from taskboard.boards.repositories import (
    BoardRepository, CategoryRepository, TaskRepository, CommentRepository,
)
from taskboard.boards.services import BoardService, CommentService


@dataclass
class TaskboardExtension:
    """Per-app wiring, reachable as app.extensions['taskboard']."""
    config: Config
    store: RecordStore
    token_service: SessionTokenService
    auth_service: AuthService
    board_service: BoardService
    comment_service: CommentService
    auth_limiter: RateLimiter


def create_app(config: Config = None, store: RecordStore = None,
               hasher: PasswordHasher = None) -> Flask:
    """Build the Flask app.

    Raises ConfigurationError when the signing key, store backend or
    policies are missing or unknown.
    """
    config = config or Config.from_env()
    logger = setup_logging(level=config.LOG_LEVEL, json_format=config.PRODUCTION)

    if not config.JWT_SECRET_KEY:
        raise ConfigurationError('JWT_SECRET_KEY environment variable is required')

    ownership = OwnershipPolicy.parse(config.OWNERSHIP_POLICY)
    sort_order = SortOrderPolicy.parse(config.SORT_ORDER_POLICY)
    if ownership is OwnershipPolicy.UNENFORCED:
        logger.warning('Ownership policy is UNENFORCED: board updates and category/task '
                       'operations are not checked against the board owner')

    store = store or create_store(config)
    token_service = SessionTokenService(
        config.JWT_SECRET_KEY,
        ttl=timedelta(hours=config.TOKEN_TTL_HOURS),
        algorithm=config.JWT_ALGORITHM,
    )
    user_repo = UserRepository(store, hasher)
    board_service = BoardService(
        BoardRepository(store), CategoryRepository(store), TaskRepository(store),
        ownership=ownership, sort_order=sort_order,
    )

    app = Flask(__name__)
    app.extensions['taskboard'] = TaskboardExtension(
        config=config,
        store=store,
        token_service=token_service,
        auth_service=AuthService(user_repo, token_service),
        board_service=board_service,
        comment_service=CommentService(CommentRepository(store), board_service),
        auth_limiter=RateLimiter(),
    )
    init_guard(app, token_service, config.SESSION_COOKIE_NAME)

    # ============== Blueprint Registrations ==============

    from taskboard.core.auth import auth_bp
    app.register_blueprint(auth_bp)

    from taskboard.boards import boards_bp
    app.register_blueprint(boards_bp)

    # ============== Global Error Handlers ==============

    @app.errorhandler(TaskboardError)
    def handle_taskboard_error(e):
        return safe_error_response(e)

    @app.errorhandler(404)
    def handle_404(e):
        return error_response('Not found', 404)

    @app.errorhandler(405)
    def handle_405(e):
        return error_response('Method not allowed', 405)

    @app.errorhandler(500)
    def handle_500(e):
        logger.exception('Unhandled 500 error')
        return error_response('An internal error occurred', 500)

    @app.route('/health')
    def health():
        if store.ping():
            return jsonify({'status': 'ok'})
        return jsonify({'status': 'unavailable'}), 503

    @app.cli.command('init-db')
    def init_db_command():
        """Create the PostgreSQL tables."""
        from taskboard.migrations.init_schema import init_db
        init_db()

    logger.info(f'Taskboard startup complete: {len(app.url_map._rules)} routes registered '
                f'(store={config.STORE_BACKEND}, ownership={ownership.value}, '
                f'sort_order={sort_order.value})')
    return app


if __name__ == '__main__':
    create_app().run(host='0.0.0.0', port=int(os.environ.get('PORT', '8000')))
