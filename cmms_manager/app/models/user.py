from typing import Optional

from .base import ApiModel


class User(ApiModel):
    """A portal user / technician as returned by the API.

    Also satisfies the Flask-Login user interface; `is_active` comes
    straight from the API record.
    """

    id: int
    username: Optional[str] = None
    full_name: str
    email: Optional[str] = None
    role: Optional[str] = None
    is_active: bool = True

    @property
    def is_authenticated(self):
        return True

    @property
    def is_anonymous(self):
        return False

    def get_id(self):
        return str(self.id)

    @property
    def initials(self):
        parts = [p for p in self.full_name.split() if p]
        return ''.join(p[0] for p in parts[:2]).upper() or '?'

    def __repr__(self):
        return f'<User {self.id}: {self.full_name} ({self.role})>'
