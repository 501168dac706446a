"""Board module services."""
from .board_service import BoardService
from .comment_service import CommentService

__all__ = ['BoardService', 'CommentService']
