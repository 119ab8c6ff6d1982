from datetime import date

from . import Service
from .assets import AssetService
from .work_orders import WorkOrderService
from ..models.maintenance import build_schedule


class MaintenanceService(Service):
    """Preventive maintenance is planned from the asset and work order
    lists; scheduling one creates a work order in the scheduled state."""

    def schedule(self, today=None):
        assets = AssetService(self.api, self.cache).list_with_details()
        work_orders = WorkOrderService(self.api, self.cache).list_with_details()
        return build_schedule(assets, work_orders, today or date.today())

    def preventive_type_id(self):
        types = WorkOrderService(self.api, self.cache).list_types()
        return next((t.id for t in types if t.name.lower() == 'preventive'), None)

    def schedule_work_order(self, payload):
        return WorkOrderService(self.api, self.cache).create(payload)
