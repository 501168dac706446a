"""Repository for the categories collection."""
from taskboard.core.base_repository import BaseRepository


class CategoryRepository(BaseRepository):

    collection = 'categories'

    def get_by_board(self, board_id):
        return self.list_by(board_id=board_id)
