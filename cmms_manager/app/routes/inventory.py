from flask import flash, redirect, render_template, request, url_for
from flask_login import login_required

from ..api import ApiError
from ..forms import InventoryItemForm, StockAdjustmentForm, flash_errors
from ..models import INVENTORY_TABS
from ..models.inventory import filter_by_tab
from ..services.inventory import InventoryService, StockAdjustmentError
from . import inventory_bp as bp


@bp.route('/')
@login_required
def list_items():
    tab = request.args.get('tab', 'all')
    if tab not in INVENTORY_TABS:
        tab = 'all'
    items = filter_by_tab(InventoryService.current().list_with_details(), tab)

    if request.headers.get('HX-Request'):
        return render_template('partials/inventory_table.html', items=items)
    return render_template('inventory/list.html', title='Inventory', items=items,
                           tab=tab, tabs=INVENTORY_TABS)


@bp.route('/add', methods=['GET', 'POST'])
@login_required
def add_item():
    service = InventoryService.current()
    form = InventoryItemForm()
    form.set_choices(service.list_categories())
    if form.validate_on_submit():
        try:
            item = service.create(form.payload())
        except ApiError as e:
            flash(f'Error creating item: {e.message}', 'danger')
        else:
            flash(f'Item {item.part_number} created.', 'success')
            return redirect(url_for('inventory.view_item', item_id=item.id))
    return render_template('inventory/form.html', title='New Inventory Item', form=form)


@bp.route('/<int:item_id>')
@login_required
def view_item(item_id):
    item = InventoryService.current().get_details(item_id)
    return render_template('inventory/detail.html', title=item.name, item=item,
                           adjust_form=StockAdjustmentForm())


@bp.route('/<int:item_id>/edit', methods=['GET', 'POST'])
@login_required
def edit_item(item_id):
    service = InventoryService.current()
    item = service.get_details(item_id)
    form = InventoryItemForm(obj=item)
    form.set_choices(service.list_categories())
    if form.validate_on_submit():
        try:
            service.update(item_id, form.payload())
        except ApiError as e:
            flash(f'Error updating item: {e.message}', 'danger')
        else:
            flash('Item updated.', 'success')
            return redirect(url_for('inventory.view_item', item_id=item_id))
    return render_template('inventory/form.html', title=f'Edit {item.part_number}',
                           form=form, item=item)


@bp.route('/<int:item_id>/adjust', methods=['POST'])
@login_required
def adjust_stock(item_id):
    form = StockAdjustmentForm()
    if form.validate_on_submit():
        try:
            item = InventoryService.current().adjust_stock(item_id, form.amount.data,
                                                          form.direction.data)
        except StockAdjustmentError as e:
            flash(str(e), 'danger')
        except ApiError as e:
            flash(f'Error adjusting stock: {e.message}', 'danger')
        else:
            flash(f'Stock updated: {item.quantity_in_stock} in stock.', 'success')
    else:
        flash_errors(form)
    return redirect(url_for('inventory.view_item', item_id=item_id))
