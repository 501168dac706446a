"""Boards Module.

Boards, categories, tasks and comments owned by the logged-in user.
"""
from flask import Blueprint

boards_bp = Blueprint('boards', __name__)

from . import routes  # noqa: E402, F401
