"""Board Service — boards, categories and tasks scoped to their owner.

Every operation takes the caller (a core.auth.models.User). Ownership is
checked according to the configured OwnershipPolicy; sort_id allocation
follows the SortOrderPolicy. Listings are ordered by (sort_id, id), so
records sharing a sort_id still come back in insertion order.
"""
import logging
from typing import Any, Dict, List, Optional

from taskboard.core.exceptions import Forbidden, InvalidInput, NotFound
from taskboard.boards.policies import OwnershipPolicy, SortOrderPolicy
from taskboard.boards.repositories import BoardRepository, CategoryRepository, TaskRepository

logger = logging.getLogger('taskboard.boards.service')


def require_text(data: Dict[str, Any], field: str) -> str:
    value = data.get(field)
    if not isinstance(value, str) or not value.strip():
        raise InvalidInput(f'{field} is required')
    return value.strip()


def optional_text(data: Dict[str, Any], field: str) -> Optional[str]:
    value = data.get(field)
    if value is not None and not isinstance(value, str):
        raise InvalidInput(f'{field} must be text')
    return value


def optional_int(data: Dict[str, Any], field: str) -> Optional[int]:
    value = data.get(field)
    if value is None:
        return None
    if isinstance(value, bool):
        raise InvalidInput(f'{field} must be an integer')
    try:
        return int(value)
    except (TypeError, ValueError):
        raise InvalidInput(f'{field} must be an integer')


def require_int(data: Dict[str, Any], field: str) -> int:
    value = optional_int(data, field)
    if value is None:
        raise InvalidInput(f'{field} is required')
    return value


class BoardService:
    """Orchestrates board, category and task operations."""

    def __init__(self, board_repo: BoardRepository, category_repo: CategoryRepository,
                 task_repo: TaskRepository,
                 ownership: OwnershipPolicy = OwnershipPolicy.ENFORCED,
                 sort_order: SortOrderPolicy = SortOrderPolicy.SEQUENCE):
        self.board_repo = board_repo
        self.category_repo = category_repo
        self.task_repo = task_repo
        self.ownership = ownership
        self.sort_order = sort_order

    @property
    def enforced(self) -> bool:
        return self.ownership is OwnershipPolicy.ENFORCED

    # ============== Ownership checks ==============

    def owned_board(self, caller, board_id: int, write: bool = False) -> Dict[str, Any]:
        """Load a board the caller owns.

        A board owned by someone else is reported as missing on reads and
        as Forbidden on writes.
        """
        board = self.board_repo.get_by_id(board_id)
        if not board:
            raise NotFound('Board not found')
        if board['user_id'] != caller.id:
            if write:
                logger.warning(f'User {caller.id} denied write on board {board_id}')
                raise Forbidden('You do not own this board')
            raise NotFound('Board not found')
        return board

    def _category(self, caller, category_id: int, write: bool = False) -> Dict[str, Any]:
        category = self.category_repo.get_by_id(category_id)
        if not category:
            raise NotFound('Category not found')
        if self.enforced:
            self.owned_board(caller, category['board_id'], write=write)
        return category

    def task_for(self, caller, task_id: int, write: bool = False) -> Dict[str, Any]:
        """Load a task, checking the category -> board chain when enforced."""
        task = self.task_repo.get_by_id(task_id)
        if not task:
            raise NotFound('Task not found')
        if self.enforced:
            self._category(caller, task['category_id'], write=write)
        return task

    # ============== Boards ==============

    def create_board(self, caller, data: Dict[str, Any]) -> Dict[str, Any]:
        name = require_text(data, 'name')
        board = self.board_repo.create({
            'name': name,
            'background': optional_text(data, 'background'),
            'user_id': caller.id,
            'sort_id': self.sort_order.next_sort_id(self.board_repo),
        })
        logger.info(f"User {caller.id} created board {board['id']}")
        return board

    def list_boards(self, caller) -> List[Dict[str, Any]]:
        return self.board_repo.get_by_owner(caller.id)

    def get_board(self, caller, board_id: int) -> Dict[str, Any]:
        board = self.board_repo.get_owned(board_id, caller.id)
        if not board:
            raise NotFound('Board not found')
        return board

    def update_board(self, caller, board_id: int, data: Dict[str, Any]) -> Dict[str, Any]:
        if self.enforced:
            self.owned_board(caller, board_id, write=True)
        elif not self.board_repo.get_by_id(board_id):
            raise NotFound('Board not found')

        patch = {}
        if 'name' in data:
            patch['name'] = require_text(data, 'name')
        if 'background' in data:
            patch['background'] = optional_text(data, 'background')
        if 'sortId' in data:
            patch['sort_id'] = require_int(data, 'sortId')
        return self.board_repo.update(board_id, patch)

    def delete_board(self, caller, board_id: int) -> bool:
        # Checked under every policy
        self.owned_board(caller, board_id, write=True)
        self.board_repo.delete(board_id)
        logger.info(f'User {caller.id} deleted board {board_id}')
        return True

    # ============== Categories ==============

    def create_category(self, caller, data: Dict[str, Any]) -> Dict[str, Any]:
        name = require_text(data, 'name')
        board_id = require_int(data, 'boardId')
        if self.enforced:
            self.owned_board(caller, board_id, write=True)
        return self.category_repo.create({
            'name': name,
            'board_id': board_id,
            'sort_id': self.sort_order.next_sort_id(self.category_repo),
        })

    def list_categories(self, caller, board_id: int) -> List[Dict[str, Any]]:
        if self.enforced:
            self.owned_board(caller, board_id)
        return self.category_repo.get_by_board(board_id)

    def get_category(self, caller, category_id: int) -> Dict[str, Any]:
        return self._category(caller, category_id)

    def update_category(self, caller, category_id: int, data: Dict[str, Any]) -> Dict[str, Any]:
        self._category(caller, category_id, write=True)
        patch = {}
        if 'name' in data:
            patch['name'] = require_text(data, 'name')
        if 'sortId' in data:
            patch['sort_id'] = require_int(data, 'sortId')
        return self.category_repo.update(category_id, patch)

    def delete_category(self, caller, category_id: int) -> bool:
        self._category(caller, category_id, write=True)
        return self.category_repo.delete(category_id)

    # ============== Tasks ==============

    def create_task(self, caller, data: Dict[str, Any]) -> Dict[str, Any]:
        name = require_text(data, 'name')
        category_id = require_int(data, 'categoryId')
        if self.enforced:
            self._category(caller, category_id, write=True)
        return self.task_repo.create({
            'name': name,
            'description': optional_text(data, 'description') or '',
            'category_id': category_id,
            'sort_id': self.sort_order.next_sort_id(self.task_repo),
        })

    def list_tasks(self, caller, category_id: int) -> List[Dict[str, Any]]:
        if self.enforced:
            self._category(caller, category_id)
        return self.task_repo.get_by_category(category_id)

    def get_task(self, caller, task_id: int) -> Dict[str, Any]:
        return self.task_for(caller, task_id)

    def update_task(self, caller, task_id: int, data: Dict[str, Any]) -> Dict[str, Any]:
        self.task_for(caller, task_id, write=True)
        patch = {}
        if 'name' in data:
            patch['name'] = require_text(data, 'name')
        if 'description' in data:
            patch['description'] = optional_text(data, 'description') or ''
        if 'sortId' in data:
            patch['sort_id'] = require_int(data, 'sortId')
        if 'categoryId' in data:
            category_id = require_int(data, 'categoryId')
            # Moving a task requires write access to the target category too
            if self.enforced:
                self._category(caller, category_id, write=True)
            patch['category_id'] = category_id
        return self.task_repo.update(task_id, patch)

    def delete_task(self, caller, task_id: int) -> bool:
        self.task_for(caller, task_id, write=True)
        return self.task_repo.delete(task_id)
