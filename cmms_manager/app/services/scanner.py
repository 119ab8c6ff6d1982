from dataclasses import dataclass
from typing import Union

from . import Service, decode
from ..api import DecodingError
from ..models import Asset, InventoryItem

SCAN = '/api/scan'


@dataclass
class ScanResult:
    kind: str
    item: Union[Asset, InventoryItem]

    @property
    def label(self):
        return getattr(self.item, 'description', None) or getattr(self.item, 'name', '')


class ScannerService(Service):

    def lookup(self, barcode):
        """Find the asset or inventory item carrying `barcode`.

        Raises ApiError (404 'No item found with this barcode') when
        nothing matches.
        """
        payload = self.api.post(SCAN, json={'barcode': barcode.strip()})
        if not isinstance(payload, dict) or 'item' not in payload:
            raise DecodingError('ScanResult', [])
        if payload.get('type') == 'asset':
            return ScanResult('asset', decode(Asset, payload['item']))
        return ScanResult('inventoryItem', decode(InventoryItem, payload['item']))
