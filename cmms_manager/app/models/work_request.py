from datetime import datetime
from typing import Optional

from .asset import Asset
from .base import ApiModel
from .user import User
from .work_order import WorkOrderPriority


class WorkRequest(ApiModel):
    id: int
    request_number: Optional[str] = None
    title: str
    description: Optional[str] = None
    asset_id: Optional[int] = None
    priority: WorkOrderPriority = WorkOrderPriority.MEDIUM
    status: str = "pending"
    requested_by_id: Optional[int] = None
    date_requested: Optional[datetime] = None
    work_order_id: Optional[int] = None

    @property
    def is_converted(self):
        return self.work_order_id is not None


class WorkRequestWithDetails(WorkRequest):
    asset: Optional[Asset] = None
    requested_by: Optional[User] = None
