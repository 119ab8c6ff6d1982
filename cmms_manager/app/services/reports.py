from decimal import Decimal

from . import Service
from .assets import AssetService
from .inventory import InventoryService
from .work_orders import WorkOrderService
from ..formatting import status_label
from ..models import AssetStatus, WorkOrderStatus

REPORT_TABS = ('work_orders', 'assets', 'inventory', 'costs')


def work_order_summary(work_orders):
    total = len(work_orders)
    completed = sum(1 for wo in work_orders if wo.status == WorkOrderStatus.COMPLETED)
    in_progress = sum(1 for wo in work_orders if wo.status == WorkOrderStatus.IN_PROGRESS)
    return {
        'total': total,
        'completed': completed,
        'in_progress': in_progress,
        'pending': total - completed - in_progress,
        'completion_rate': round(completed * 100 / total) if total else 0,
    }


def asset_summary(assets):
    by_status = {status: 0 for status in AssetStatus}
    for asset in assets:
        by_status[asset.status] += 1
    retired = by_status[AssetStatus.RETIRED]
    return {
        'total': len(assets),
        'in_service': len(assets) - retired,
        'retired': retired,
        'by_status': by_status,
    }


def inventory_summary(items):
    low_stock = sum(1 for item in items if item.is_low_stock)
    return {
        'total': len(items),
        'low_stock': low_stock,
        'adequate': len(items) - low_stock,
        'valuation': sum((item.stock_value for item in items), Decimal('0')),
    }


def cost_summary(work_orders):
    """Labor and parts booked against work orders."""
    labor_hours = Decimal('0')
    labor_cost = Decimal('0')
    parts_cost = Decimal('0')
    for wo in work_orders:
        labor_hours += wo.labor_hours
        labor_cost += sum((e.labor_cost or Decimal('0') for e in wo.labor_entries), Decimal('0'))
        parts_cost += wo.parts_cost
    return {
        'labor_hours': labor_hours,
        'labor_cost': labor_cost,
        'parts_cost': parts_cost,
        'total_cost': labor_cost + parts_cost,
    }


class ReportService(Service):

    def summary(self, tab):
        if tab == 'assets':
            return asset_summary(AssetService(self.api, self.cache).list_assets())
        if tab == 'inventory':
            return inventory_summary(InventoryService(self.api, self.cache).list_items())
        work_orders = WorkOrderService(self.api, self.cache).list_with_details()
        if tab == 'costs':
            return cost_summary(work_orders)
        return work_order_summary(work_orders)

    def rows(self, tab):
        """(label, value) pairs of a summary, for the CSV export."""
        summary = self.summary(tab)
        rows = []
        for name, value in summary.items():
            if isinstance(value, dict):
                rows += [(f"{status_label(name)}: {status_label(key)}", count)
                         for key, count in value.items()]
            else:
                rows.append((status_label(name), value))
        return rows
