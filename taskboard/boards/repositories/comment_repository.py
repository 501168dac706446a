"""Repository for the comments collection."""
from datetime import datetime, timezone

from taskboard.core.base_repository import BaseRepository


def utc_now_iso():
    return datetime.now(timezone.utc).isoformat()


class CommentRepository(BaseRepository):

    collection = 'comments'

    def get_by_task(self, task_id):
        return self.list_by(order_by=('date', 'id'), task_id=task_id)

    def create(self, task_id, user_info, comment):
        return super().create({
            'task_id': task_id,
            'comment': comment,
            'user_info': user_info,
            'date': utc_now_iso(),
        })

    def update_text(self, comment_id, comment):
        """Replace the text and move the date to now."""
        return self.update(comment_id, {'comment': comment, 'date': utc_now_iso()})
