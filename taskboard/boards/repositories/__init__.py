"""Board module repositories."""
from .board_repository import BoardRepository
from .category_repository import CategoryRepository
from .task_repository import TaskRepository
from .comment_repository import CommentRepository

__all__ = ['BoardRepository', 'CategoryRepository', 'TaskRepository', 'CommentRepository']
