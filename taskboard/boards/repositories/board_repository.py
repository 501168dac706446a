"""Repository for the boards collection."""
from taskboard.core.base_repository import BaseRepository


class BoardRepository(BaseRepository):

    collection = 'boards'

    def get_by_owner(self, user_id):
        return self.list_by(user_id=user_id)

    def get_owned(self, board_id, user_id):
        return self.find_by(id=board_id, user_id=user_id)
