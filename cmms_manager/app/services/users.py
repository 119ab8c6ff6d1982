from typing import List

from . import Service
from ..models import User

USERS = '/api/users'


class UserService(Service):

    def list_users(self):
        return self.query(USERS, List[User])

    def active_users(self):
        return [u for u in self.list_users() if u.is_active]

    def get(self, user_id):
        return next((u for u in self.list_users() if u.id == user_id), None)
