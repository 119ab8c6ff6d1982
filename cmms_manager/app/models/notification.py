from datetime import datetime
from typing import Optional

from .base import ApiModel


class Notification(ApiModel):
    id: int
    title: str
    message: Optional[str] = None
    type: Optional[str] = None
    is_read: bool = False
    is_dismissed: bool = False
    created_at: Optional[datetime] = None
    link: Optional[str] = None
