from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum
from typing import Optional

from .asset import AssetStatus, AssetWithDetails
from .work_order import WorkOrderStatus


class ScheduleStatus(str, Enum):
    UPCOMING = "upcoming"
    DUE = "due"
    OVERDUE = "overdue"
    COMPLETED = "completed"


MAINTENANCE_TYPES = ('General Inspection', 'Lubrication', 'Parts Replacement',
                     'Calibration', 'Cleaning', 'Safety Check')

# days between occurrences
RECURRING_PERIODS = {
    'daily': 1,
    'weekly': 7,
    'biweekly': 14,
    'monthly': 30,
    'quarterly': 91,
    'semiannual': 182,
    'annual': 365,
}

PM_TITLE_PREFIX = 'Preventive Maintenance'


def pm_title(maintenance_type):
    return f'{PM_TITLE_PREFIX} - {maintenance_type}'


def service_interval(asset):
    """30, 60 or 90 days depending on the asset."""
    return timedelta(days=(asset.id % 3 + 1) * 30)


@dataclass
class ScheduleEvent:
    asset: AssetWithDetails
    due_date: date
    status: ScheduleStatus
    work_order_id: Optional[int] = None

    @property
    def title(self):
        kind = self.asset.type.name if self.asset.type else 'Equipment'
        return f'{kind} Maintenance'


def _pm_work_order(work_orders, asset_id, due_date):
    return next((wo for wo in work_orders
                 if wo.asset_id == asset_id and wo.date_needed
                 and wo.date_needed.date() == due_date
                 and wo.title.startswith(PM_TITLE_PREFIX)), None)


def build_schedule(assets, work_orders, today, occurrences=3):
    """Upcoming preventive maintenance for every operational asset.

    The first occurrence follows the last service date by one interval;
    assets never serviced are staggered over the next two weeks. An
    occurrence whose scheduled PM work order is completed shows as
    completed, otherwise it is due today, overdue or upcoming.
    """
    events = []
    for asset in assets:
        if asset.status != AssetStatus.OPERATIONAL:
            continue
        interval = service_interval(asset)
        if asset.last_service_date:
            due = asset.last_service_date.date() + interval
        else:
            due = today + timedelta(days=asset.id % 14 + 1)

        for _ in range(occurrences):
            work_order = _pm_work_order(work_orders, asset.id, due)
            if work_order and work_order.status == WorkOrderStatus.COMPLETED:
                status = ScheduleStatus.COMPLETED
            elif due == today:
                status = ScheduleStatus.DUE
            elif due < today:
                status = ScheduleStatus.OVERDUE
            else:
                status = ScheduleStatus.UPCOMING
            events.append(ScheduleEvent(asset, due, status,
                                        work_order.id if work_order else None))
            due += interval

    return sorted(events, key=lambda e: (e.due_date, e.asset.asset_number))


def schedule_counts(events):
    counts = {status: 0 for status in ScheduleStatus}
    for event in events:
        counts[event.status] += 1
    return counts
