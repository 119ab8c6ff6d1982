from typing import List

from . import Service, decode, query_key
from .assets import ASSETS, ASSETS_DETAILS, asset_details_key
from .inventory import inventory_item_keys
from ..models import (WorkOrder, WorkOrderLabor, WorkOrderPart, WorkOrderStatus,
                      WorkOrderType, WorkOrderWithDetails, assignable_work_orders,
                      match_enum)

WORK_ORDERS = '/api/work-orders'
WORK_ORDERS_DETAILS = '/api/work-orders/details'
WORK_ORDER_TYPES = '/api/work-order-types'


class AssignmentError(ValueError):
    """The chosen technician or work order cannot take this assignment."""


def work_order_details_key(work_order_id):
    return query_key(WORK_ORDERS, work_order_id, 'details')


def work_order_keys(work_order_id):
    """Cached reads that embed the work order, the asset list with details
    included. Its asset's own view comes from asset_detail_keys."""
    return [work_order_details_key(work_order_id), WORK_ORDERS, WORK_ORDERS_DETAILS,
            ASSETS_DETAILS]


def asset_detail_keys(work_order):
    """The detail view of the asset a work order is for, if any."""
    return [asset_details_key(work_order.asset_id)] if work_order.asset_id else []


class WorkOrderService(Service):

    def list_work_orders(self):
        return self.query(WORK_ORDERS, List[WorkOrder])

    def list_with_details(self):
        return self.query(WORK_ORDERS_DETAILS, List[WorkOrderWithDetails])

    def get_details(self, work_order_id):
        return self.query(work_order_details_key(work_order_id), WorkOrderWithDetails)

    def list_types(self):
        return self.query(WORK_ORDER_TYPES, List[WorkOrderType])

    def assignable(self):
        return assignable_work_orders(self.list_with_details())

    def assigned_counts(self):
        counts = {}
        for wo in self.list_with_details():
            if wo.assigned_to_id:
                counts[wo.assigned_to_id] = counts.get(wo.assigned_to_id, 0) + 1
        return counts

    def create(self, payload):
        def call():
            return decode(WorkOrder, self.api.post(WORK_ORDERS, json=payload))

        return self.mutation(call, invalidates=[WORK_ORDERS, WORK_ORDERS_DETAILS, ASSETS_DETAILS],
                             related=asset_detail_keys).run()

    def update_mutation(self, work_order_id, changes):
        """Moving a work order to another asset changes two asset views, and
        only the new one is known from the reply."""
        def call():
            return decode(WorkOrder, self.api.put(f'{WORK_ORDERS}/{work_order_id}', json=changes))

        prefixes = [ASSETS] if 'assetId' in changes else []
        return self.mutation(call, invalidates=work_order_keys(work_order_id),
                             invalidates_prefixes=prefixes, related=asset_detail_keys)

    def update(self, work_order_id, changes):
        return self.update_mutation(work_order_id, changes).run()

    def status_mutation(self, work_order_id, status):
        status = match_enum(WorkOrderStatus, status)
        return self.update_mutation(work_order_id, {'status': status.value})

    def update_status(self, work_order_id, status):
        return self.status_mutation(work_order_id, status).run()

    def assign(self, work_order_id, user_id, users):
        """Give a work order to a technician.

        `users` is the known user list; the assignee must exist and be
        active, and the work order must still be assignable.
        """
        user = next((u for u in users if u.id == user_id), None)
        if user is None:
            raise AssignmentError(f'Unknown user {user_id}')
        if not user.is_active:
            raise AssignmentError(f'{user.full_name} is not an active user')
        if work_order_id not in {wo.id for wo in self.assignable()}:
            raise AssignmentError('Work order is no longer available for assignment')
        return self.update(work_order_id, {'assignedToId': user.id})

    def unassign(self, work_order_id):
        return self.update(work_order_id, {'assignedToId': None})

    def log_labor(self, work_order_id, payload):
        def call():
            return decode(WorkOrderLabor,
                          self.api.post(f'{WORK_ORDERS}/{work_order_id}/labor', json=payload))

        return self.mutation(
            call, invalidates=[work_order_details_key(work_order_id), WORK_ORDERS_DETAILS]).run()

    def issue_part(self, work_order_id, inventory_item_id, quantity):
        """Parts drawn from stock change the inventory views, and every work
        order detail that lists the same part."""
        def call():
            return decode(WorkOrderPart, self.api.post(
                f'{WORK_ORDERS}/{work_order_id}/parts',
                json={'inventoryItemId': inventory_item_id, 'quantity': quantity}))

        keys = [work_order_details_key(work_order_id), WORK_ORDERS_DETAILS]
        keys += inventory_item_keys(inventory_item_id)
        return self.mutation(call, invalidates=keys, invalidates_prefixes=[WORK_ORDERS]).run()
