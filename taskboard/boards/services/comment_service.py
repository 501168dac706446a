"""Comment Service — task comments with author-only edits.

A comment stores a snapshot of its author's profile taken at creation,
so later profile changes never rewrite history. Only the author (matched
on user_info.id) may edit or delete a comment, whatever the ownership
policy.
"""
import logging
from typing import Any, Dict, List

from taskboard.core.exceptions import Forbidden, NotFound
from taskboard.boards.repositories import CommentRepository
from .board_service import BoardService, require_text

logger = logging.getLogger('taskboard.boards.comments')


class CommentService:

    def __init__(self, comment_repo: CommentRepository, board_service: BoardService):
        self.comment_repo = comment_repo
        self.board_service = board_service

    def _authored(self, caller, comment_id: int) -> Dict[str, Any]:
        comment = self.comment_repo.get_by_id(comment_id)
        if not comment:
            raise NotFound('Comment not found')
        author = comment.get('user_info') or {}
        if author.get('id') != caller.id:
            logger.warning(f'User {caller.id} denied edit on comment {comment_id}')
            raise Forbidden('Only the author can change this comment')
        return comment

    def create_comment(self, caller, task_id: int, data: Dict[str, Any]) -> Dict[str, Any]:
        text = require_text(data, 'comment')
        if self.board_service.enforced:
            self.board_service.task_for(caller, task_id, write=True)
        return self.comment_repo.create(task_id, caller.snapshot(), text)

    def list_comments(self, caller, task_id: int) -> List[Dict[str, Any]]:
        if self.board_service.enforced:
            self.board_service.task_for(caller, task_id)
        return self.comment_repo.get_by_task(task_id)

    def update_comment(self, caller, comment_id: int, data: Dict[str, Any]) -> Dict[str, Any]:
        self._authored(caller, comment_id)
        text = require_text(data, 'comment')
        return self.comment_repo.update_text(comment_id, text)

    def delete_comment(self, caller, comment_id: int) -> bool:
        self._authored(caller, comment_id)
        return self.comment_repo.delete(comment_id)
