from typing import List

from . import Service, decode, query_key
from .assets import ASSETS_DETAILS
from .work_orders import WORK_ORDERS, WORK_ORDERS_DETAILS, asset_detail_keys
from ..models import WorkOrder, WorkRequest, WorkRequestWithDetails

WORK_REQUESTS = '/api/work-requests'
WORK_REQUESTS_DETAILS = '/api/work-requests/details'


def work_request_details_key(request_id):
    return query_key(WORK_REQUESTS, request_id, 'details')


class WorkRequestService(Service):

    def list_with_details(self):
        return self.query(WORK_REQUESTS_DETAILS, List[WorkRequestWithDetails])

    def create(self, payload):
        def call():
            return decode(WorkRequest, self.api.post(WORK_REQUESTS, json=payload))

        return self.mutation(call, invalidates=[WORK_REQUESTS, WORK_REQUESTS_DETAILS]).run()

    def convert(self, request_id, extra=None):
        """Turn a request into a work order; both families of views change,
        and so do the asset views listing work orders."""
        def call():
            return decode(WorkOrder, self.api.post(f'{WORK_REQUESTS}/{request_id}/convert',
                                                   json=extra or {}))

        keys = [work_request_details_key(request_id), WORK_REQUESTS, WORK_REQUESTS_DETAILS,
                WORK_ORDERS, WORK_ORDERS_DETAILS, ASSETS_DETAILS]
        return self.mutation(call, invalidates=keys, related=asset_detail_keys).run()
