from typing import List

from . import Service, decode
from ..models import Notification

NOTIFICATIONS = '/api/notifications'
NOTIFICATIONS_COUNT = '/api/notifications/count'
NOTIFICATION_KEYS = [NOTIFICATIONS, NOTIFICATIONS_COUNT]


class NotificationService(Service):

    def list_notifications(self):
        return self.query(NOTIFICATIONS, List[Notification])

    def unread_count(self):
        payload = self.cache.fetch(NOTIFICATIONS_COUNT, lambda: self.api.get(NOTIFICATIONS_COUNT))
        if isinstance(payload, dict):
            return int(payload.get('count') or 0)
        return 0

    def _put(self, path):
        return self.mutation(lambda: self.api.put(path), invalidates=NOTIFICATION_KEYS).run()

    def mark_read(self, notification_id):
        return self._put(f'{NOTIFICATIONS}/{notification_id}/read')

    def dismiss(self, notification_id):
        return self._put(f'{NOTIFICATIONS}/{notification_id}/dismiss')

    def mark_all_read(self):
        return self._put(f'{NOTIFICATIONS}/read-all')

    def delete(self, notification_id):
        return self.mutation(lambda: self.api.delete(f'{NOTIFICATIONS}/{notification_id}'),
                             invalidates=NOTIFICATION_KEYS).run()
