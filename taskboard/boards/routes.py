"""Board, category, task and comment routes.

All routes require a session token. Payloads are camelCase; records are
stored snake_case and converted on the way out.
"""
from flask import current_app, jsonify
from flask_login import current_user

from . import boards_bp
from taskboard.core.auth.guard import token_required
from taskboard.core.utils.api_helpers import camelize, get_json_or_error, handle_api_errors


def _boards():
    return current_app.extensions['taskboard'].board_service


def _comments():
    return current_app.extensions['taskboard'].comment_service


def _deleted(what):
    return jsonify({'success': True, 'message': f'{what} deleted'})


# ---- Boards ----

@boards_bp.route('/boards', methods=['POST'])
@handle_api_errors
@token_required
def create_board():
    data, error = get_json_or_error()
    if error:
        return error
    return jsonify(camelize(_boards().create_board(current_user, data))), 201


@boards_bp.route('/boards', methods=['GET'])
@handle_api_errors
@token_required
def list_boards():
    return jsonify(camelize(_boards().list_boards(current_user)))


@boards_bp.route('/boards/<int:board_id>', methods=['GET'])
@handle_api_errors
@token_required
def get_board(board_id):
    return jsonify(camelize(_boards().get_board(current_user, board_id)))


@boards_bp.route('/boards/<int:board_id>', methods=['PUT'])
@handle_api_errors
@token_required
def update_board(board_id):
    data, error = get_json_or_error()
    if error:
        return error
    return jsonify(camelize(_boards().update_board(current_user, board_id, data)))


@boards_bp.route('/boards/<int:board_id>', methods=['DELETE'])
@handle_api_errors
@token_required
def delete_board(board_id):
    _boards().delete_board(current_user, board_id)
    return _deleted('Board')


# ---- Categories ----

@boards_bp.route('/categories', methods=['POST'])
@handle_api_errors
@token_required
def create_category():
    data, error = get_json_or_error()
    if error:
        return error
    return jsonify(camelize(_boards().create_category(current_user, data))), 201


@boards_bp.route('/categories/<int:board_id>', methods=['GET'])
@handle_api_errors
@token_required
def list_categories(board_id):
    return jsonify(camelize(_boards().list_categories(current_user, board_id)))


@boards_bp.route('/category/<int:category_id>', methods=['GET'])
@handle_api_errors
@token_required
def get_category(category_id):
    return jsonify(camelize(_boards().get_category(current_user, category_id)))


@boards_bp.route('/category/<int:category_id>', methods=['PUT'])
@handle_api_errors
@token_required
def update_category(category_id):
    data, error = get_json_or_error()
    if error:
        return error
    return jsonify(camelize(_boards().update_category(current_user, category_id, data)))


@boards_bp.route('/category/<int:category_id>', methods=['DELETE'])
@handle_api_errors
@token_required
def delete_category(category_id):
    _boards().delete_category(current_user, category_id)
    return _deleted('Category')


# ---- Tasks ----

@boards_bp.route('/tasks', methods=['POST'])
@handle_api_errors
@token_required
def create_task():
    data, error = get_json_or_error()
    if error:
        return error
    return jsonify(camelize(_boards().create_task(current_user, data))), 201


@boards_bp.route('/tasks/category/<int:category_id>', methods=['GET'])
@handle_api_errors
@token_required
def list_tasks(category_id):
    return jsonify(camelize(_boards().list_tasks(current_user, category_id)))


@boards_bp.route('/tasks/<int:task_id>', methods=['GET'])
@handle_api_errors
@token_required
def get_task(task_id):
    return jsonify(camelize(_boards().get_task(current_user, task_id)))


@boards_bp.route('/tasks/<int:task_id>', methods=['PUT'])
@handle_api_errors
@token_required
def update_task(task_id):
    data, error = get_json_or_error()
    if error:
        return error
    return jsonify(camelize(_boards().update_task(current_user, task_id, data)))


@boards_bp.route('/tasks/<int:task_id>', methods=['DELETE'])
@handle_api_errors
@token_required
def delete_task(task_id):
    _boards().delete_task(current_user, task_id)
    return _deleted('Task')


# ---- Comments ----

@boards_bp.route('/tasks/<int:task_id>/comments', methods=['POST'])
@handle_api_errors
@token_required
def create_comment(task_id):
    data, error = get_json_or_error()
    if error:
        return error
    return jsonify(camelize(_comments().create_comment(current_user, task_id, data))), 201


@boards_bp.route('/tasks/<int:task_id>/comments', methods=['GET'])
@handle_api_errors
@token_required
def list_comments(task_id):
    return jsonify(camelize(_comments().list_comments(current_user, task_id)))


@boards_bp.route('/comments/<int:comment_id>', methods=['PUT'])
@handle_api_errors
@token_required
def update_comment(comment_id):
    data, error = get_json_or_error()
    if error:
        return error
    return jsonify(camelize(_comments().update_comment(current_user, comment_id, data)))


@boards_bp.route('/comments/<int:comment_id>', methods=['DELETE'])
@handle_api_errors
@token_required
def delete_comment(comment_id):
    _comments().delete_comment(current_user, comment_id)
    return _deleted('Comment')
