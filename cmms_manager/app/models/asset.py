from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import List, Optional

from .base import ApiModel


class AssetStatus(str, Enum):
    OPERATIONAL = "operational"
    NON_OPERATIONAL = "non_operational"
    MAINTENANCE_REQUIRED = "maintenance_required"
    RETIRED = "retired"


# list tabs on the assets screen
ASSET_TABS = {
    'all': None,
    'operational': AssetStatus.OPERATIONAL,
    'maintenance': AssetStatus.MAINTENANCE_REQUIRED,
    'non_operational': AssetStatus.NON_OPERATIONAL,
}


class AssetType(ApiModel):
    id: int
    name: str
    description: Optional[str] = None


class Asset(ApiModel):
    id: int
    asset_number: str
    description: str
    status: AssetStatus = AssetStatus.OPERATIONAL
    type_id: Optional[int] = None
    parent_id: Optional[int] = None
    location: Optional[str] = None
    manufacturer: Optional[str] = None
    model: Optional[str] = None
    serial_number: Optional[str] = None
    install_date: Optional[datetime] = None
    warranty_expiration: Optional[datetime] = None
    replacement_cost: Optional[Decimal] = None
    criticality_rating: Optional[int] = None
    last_service_date: Optional[datetime] = None
    barcode: Optional[str] = None

    def matches(self, query):
        query = query.strip().lower()
        if not query:
            return True
        fields = (self.asset_number, self.description, self.location,
                  self.manufacturer, self.model, self.serial_number)
        return any(query in f.lower() for f in fields if f)

    def warranty_active(self, now=None):
        if not self.warranty_expiration:
            return False
        now = now or datetime.now(self.warranty_expiration.tzinfo)
        return self.warranty_expiration > now

    def __repr__(self):
        return f'<Asset {self.asset_number}: {self.description} ({self.status.value})>'


class AssetWithDetails(Asset):
    type: Optional[AssetType] = None
    parent: Optional[Asset] = None
    # circular with work_order.py; resolved in models/__init__.py
    work_orders: List["WorkOrder"] = []
