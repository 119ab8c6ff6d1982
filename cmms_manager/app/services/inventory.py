from typing import List

from . import Service, decode, query_key
from ..models import InventoryCategory, InventoryItem, InventoryItemWithDetails

INVENTORY_ITEMS = '/api/inventory-items'
INVENTORY_DETAILS = '/api/inventory-items/details'
INVENTORY_CATEGORIES = '/api/inventory-categories'


class StockAdjustmentError(ValueError):
    pass


def inventory_item_details_key(item_id):
    return query_key(INVENTORY_ITEMS, item_id, 'details')


def inventory_item_keys(item_id):
    return [inventory_item_details_key(item_id), INVENTORY_ITEMS, INVENTORY_DETAILS]


def adjusted_quantity(current, amount, direction):
    """New stock level after adding or removing `amount` units."""
    if amount is None or amount <= 0:
        raise StockAdjustmentError('Please enter a positive number')
    if direction == 'increment':
        return current + amount
    if direction == 'decrement':
        if amount > current:
            raise StockAdjustmentError('Cannot decrease below zero')
        return current - amount
    raise StockAdjustmentError(f'Unknown adjustment: {direction}')


class InventoryService(Service):

    def list_items(self):
        return self.query(INVENTORY_ITEMS, List[InventoryItem])

    def list_with_details(self):
        return self.query(INVENTORY_DETAILS, List[InventoryItemWithDetails])

    def get_details(self, item_id):
        return self.query(inventory_item_details_key(item_id), InventoryItemWithDetails)

    def list_categories(self):
        return self.query(INVENTORY_CATEGORIES, List[InventoryCategory])

    def low_stock(self):
        return [item for item in self.list_with_details() if item.is_active and item.is_low_stock]

    def create(self, payload):
        def call():
            return decode(InventoryItem, self.api.post(INVENTORY_ITEMS, json=payload))

        return self.mutation(call, invalidates=[INVENTORY_ITEMS, INVENTORY_DETAILS]).run()

    def update(self, item_id, changes):
        """Work order details list issued parts with the item embedded."""
        from .work_orders import WORK_ORDERS

        def call():
            return decode(InventoryItem, self.api.put(f'{INVENTORY_ITEMS}/{item_id}', json=changes))

        return self.mutation(call, invalidates=inventory_item_keys(item_id),
                             invalidates_prefixes=[WORK_ORDERS]).run()

    def adjust_stock(self, item_id, amount, direction):
        item = self.get_details(item_id)
        quantity = adjusted_quantity(item.quantity_in_stock, amount, direction)
        return self.update(item_id, {'quantityInStock': quantity})
