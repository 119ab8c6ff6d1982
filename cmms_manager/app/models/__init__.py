# app/models/__init__.py
from .base import ApiModel, match_enum
from .user import User
from .asset import Asset, AssetStatus, AssetType, AssetWithDetails, ASSET_TABS
from .inventory import InventoryCategory, InventoryItem, InventoryItemWithDetails, INVENTORY_TABS
from .work_order import (WorkOrder, WorkOrderLabor, WorkOrderPart, WorkOrderPriority,
                         WorkOrderStatus, WorkOrderType, WorkOrderWithDetails,
                         WORK_ORDER_TABS, assignable_work_orders)
from .document import Document, EntityType
from .work_request import WorkRequest, WorkRequestWithDetails
from .notification import Notification

# AssetWithDetails embeds work orders
AssetWithDetails.model_rebuild()

__all__ = ['ApiModel', 'match_enum', 'User', 'Asset', 'AssetStatus', 'AssetType',
    'AssetWithDetails', 'ASSET_TABS', 'InventoryCategory', 'InventoryItem',
    'InventoryItemWithDetails', 'INVENTORY_TABS', 'WorkOrder', 'WorkOrderLabor',
    'WorkOrderPart', 'WorkOrderPriority', 'WorkOrderStatus', 'WorkOrderType',
    'WorkOrderWithDetails', 'WORK_ORDER_TABS', 'assignable_work_orders',
    'Document', 'EntityType', 'WorkRequest', 'WorkRequestWithDetails', 'Notification']
