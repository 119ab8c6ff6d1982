from typing import List

from . import Service, decode, query_key
from ..models import Asset, AssetStatus, AssetType, AssetWithDetails, ASSET_TABS, match_enum

ASSETS = '/api/assets'
ASSETS_DETAILS = '/api/assets/details'
ASSET_TYPES = '/api/asset-types'


def asset_details_key(asset_id):
    return query_key(ASSETS, asset_id, 'details')


def asset_keys(asset_id):
    """Every cached read that embeds the asset."""
    return [asset_details_key(asset_id), ASSETS, ASSETS_DETAILS]


def filter_assets(assets, tab='all', query=''):
    status = ASSET_TABS.get(tab)
    return [a for a in assets
            if (status is None or a.status == status) and a.matches(query or '')]


class AssetService(Service):

    def list_assets(self):
        return self.query(ASSETS, List[Asset])

    def list_with_details(self):
        return self.query(ASSETS_DETAILS, List[AssetWithDetails])

    def get_details(self, asset_id):
        return self.query(asset_details_key(asset_id), AssetWithDetails)

    def list_types(self):
        return self.query(ASSET_TYPES, List[AssetType])

    def create(self, payload):
        def call():
            return decode(Asset, self.api.post(ASSETS, json=payload))

        return self.mutation(call, invalidates=[ASSETS, ASSETS_DETAILS]).run()

    def update_mutation(self, asset_id, changes):
        """PUT a partial update.

        The asset is embedded in more reads than its own: child assets show
        it as their parent, and work order and work request lists and
        details carry it too, so whole key families go stale.
        """
        from .work_orders import WORK_ORDERS
        from .work_requests import WORK_REQUESTS

        def call():
            return decode(Asset, self.api.put(f'{ASSETS}/{asset_id}', json=changes))

        return self.mutation(call, invalidates=asset_keys(asset_id),
                             invalidates_prefixes=[ASSETS, WORK_ORDERS, WORK_REQUESTS])

    def update(self, asset_id, changes):
        return self.update_mutation(asset_id, changes).run()

    def status_mutation(self, asset_id, status):
        status = match_enum(AssetStatus, status)
        return self.update_mutation(asset_id, {'status': status.value})

    def update_status(self, asset_id, status):
        return self.status_mutation(asset_id, status).run()

    def status_counts(self, assets=None):
        assets = self.list_assets() if assets is None else assets
        counts = {status: 0 for status in AssetStatus}
        for asset in assets:
            counts[asset.status] += 1
        return counts
