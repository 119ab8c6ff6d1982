from decimal import Decimal
from typing import Optional

from .base import ApiModel


class InventoryCategory(ApiModel):
    id: int
    name: str
    description: Optional[str] = None


class InventoryItem(ApiModel):
    id: int
    part_number: str
    name: str
    description: Optional[str] = None
    category_id: Optional[int] = None
    unit_cost: Optional[Decimal] = None
    quantity_in_stock: int = 0
    reorder_point: Optional[int] = None
    location: Optional[str] = None
    barcode: Optional[str] = None
    is_active: bool = True

    @property
    def is_low_stock(self):
        return self.quantity_in_stock <= (self.reorder_point or 0)

    @property
    def stock_value(self):
        return (self.unit_cost or Decimal('0')) * self.quantity_in_stock

    def __repr__(self):
        return f'<InventoryItem {self.part_number}: {self.name} x{self.quantity_in_stock}>'


class InventoryItemWithDetails(InventoryItem):
    category: Optional[InventoryCategory] = None


INVENTORY_TABS = ('all', 'low', 'active', 'inactive')


def filter_by_tab(items, tab):
    if tab == 'low':
        return [i for i in items if i.is_low_stock]
    if tab == 'active':
        return [i for i in items if i.is_active]
    if tab == 'inactive':
        return [i for i in items if not i.is_active]
    return list(items)
