from datetime import datetime
from enum import Enum
from typing import Optional

from .base import ApiModel


class EntityType(str, Enum):
    """Kinds of record a document can be attached to."""
    ASSET = "asset"
    WORK_ORDER = "workorder"


class Document(ApiModel):
    id: int
    filename: str
    filesize: int
    content_type: Optional[str] = None
    entity_type: EntityType
    entity_id: int
    upload_date: Optional[datetime] = None

    @property
    def owner(self):
        return self.entity_type, self.entity_id

    def __repr__(self):
        return f'<Document {self.filename} ({self.entity_type.value} {self.entity_id})>'
