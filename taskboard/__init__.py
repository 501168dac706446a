"""Taskboard — personal task-board backend.

Boards hold categories, categories hold tasks, tasks hold comments.
Authentication is a JWT carried in an http-only cookie.
"""

__version__ = '1.0.0'
