"""Repository for the tasks collection."""
from taskboard.core.base_repository import BaseRepository


class TaskRepository(BaseRepository):

    collection = 'tasks'

    def get_by_category(self, category_id):
        return self.list_by(category_id=category_id)
