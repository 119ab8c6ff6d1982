from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import List, Optional

from .asset import Asset
from .base import ApiModel
from .inventory import InventoryItem
from .user import User


class WorkOrderStatus(str, Enum):
    REQUESTED = "requested"
    APPROVED = "approved"
    SCHEDULED = "scheduled"
    IN_PROGRESS = "in_progress"
    ON_HOLD = "on_hold"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class WorkOrderPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


TERMINAL_STATUSES = frozenset({WorkOrderStatus.COMPLETED, WorkOrderStatus.CANCELLED})
OPEN_STATUSES = frozenset({WorkOrderStatus.REQUESTED, WorkOrderStatus.APPROVED,
                           WorkOrderStatus.SCHEDULED, WorkOrderStatus.IN_PROGRESS})

WORK_ORDER_TABS = {
    'all': None,
    'open': OPEN_STATUSES,
    'scheduled': frozenset({WorkOrderStatus.SCHEDULED}),
    'completed': frozenset({WorkOrderStatus.COMPLETED}),
}


class WorkOrderType(ApiModel):
    id: int
    name: str
    description: Optional[str] = None


class WorkOrder(ApiModel):
    id: int
    work_order_number: str
    title: str
    description: Optional[str] = None
    type_id: Optional[int] = None
    asset_id: Optional[int] = None
    priority: WorkOrderPriority = WorkOrderPriority.MEDIUM
    status: WorkOrderStatus = WorkOrderStatus.REQUESTED
    requested_by_id: Optional[int] = None
    assigned_to_id: Optional[int] = None
    date_requested: Optional[datetime] = None
    date_needed: Optional[datetime] = None
    date_scheduled: Optional[datetime] = None
    date_started: Optional[datetime] = None
    date_completed: Optional[datetime] = None
    estimated_hours: Optional[Decimal] = None
    actual_hours: Optional[Decimal] = None
    estimated_cost: Optional[Decimal] = None
    actual_cost: Optional[Decimal] = None
    completion_notes: Optional[str] = None

    @property
    def is_terminal(self):
        return self.status in TERMINAL_STATUSES

    @property
    def is_assignable(self):
        """Unassigned and still workable."""
        return not self.assigned_to_id and not self.is_terminal

    def __repr__(self):
        return f'<WorkOrder WO-{self.work_order_number}: {self.title} ({self.status.value})>'


class WorkOrderLabor(ApiModel):
    id: int
    work_order_id: int
    user_id: int
    hours: Decimal
    labor_cost: Optional[Decimal] = None
    date_performed: datetime
    notes: Optional[str] = None


class WorkOrderPart(ApiModel):
    id: int
    work_order_id: int
    inventory_item_id: int
    quantity: int
    unit_cost: Optional[Decimal] = None
    total_cost: Optional[Decimal] = None
    date_issued: datetime
    inventory_item: Optional[InventoryItem] = None


class WorkOrderWithDetails(WorkOrder):
    asset: Optional[Asset] = None
    requested_by: Optional[User] = None
    assigned_to: Optional[User] = None
    type: Optional[WorkOrderType] = None
    labor_entries: List[WorkOrderLabor] = []
    parts: List[WorkOrderPart] = []

    @property
    def labor_hours(self):
        return sum((entry.hours for entry in self.labor_entries), Decimal('0'))

    @property
    def parts_cost(self):
        return sum((part.total_cost or Decimal('0') for part in self.parts), Decimal('0'))


def assignable_work_orders(work_orders):
    """Work orders a technician may be given: no assignee and not
    completed or cancelled."""
    return [wo for wo in work_orders if wo.is_assignable]


def filter_by_tab(work_orders, tab):
    statuses = WORK_ORDER_TABS.get(tab)
    if statuses is None:
        return list(work_orders)
    return [wo for wo in work_orders if wo.status in statuses]
