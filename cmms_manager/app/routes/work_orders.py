from datetime import date

from flask import flash, redirect, render_template, request, url_for
from flask_login import current_user, login_required

from ..api import ApiError
from ..formatting import status_label
from ..forms import LaborForm, PartForm, StatusForm, WorkOrderForm, flash_errors
from ..models import EntityType, WorkOrderStatus, match_enum
from ..models.work_order import WORK_ORDER_TABS, filter_by_tab
from ..mutations import OptimisticField
from ..services.assets import AssetService
from ..services.documents import DocumentService
from ..services.inventory import InventoryService
from ..services.users import UserService
from ..services.work_orders import WorkOrderService
from . import work_orders_bp as bp


@bp.route('/')
@login_required
def list_work_orders():
    tab = request.args.get('tab', 'all')
    if tab not in WORK_ORDER_TABS:
        tab = 'all'
    work_orders = filter_by_tab(WorkOrderService.current().list_with_details(), tab)

    if request.headers.get('HX-Request'):
        return render_template('partials/work_order_table.html', work_orders=work_orders)
    return render_template('work_orders/list.html', title='Work Orders',
                           work_orders=work_orders, tab=tab, tabs=WORK_ORDER_TABS)


@bp.route('/add', methods=['GET', 'POST'])
@login_required
def add_work_order():
    service = WorkOrderService.current()
    form = WorkOrderForm()
    form.set_choices(service.list_types(), AssetService.current().list_assets(),
                     UserService.current().list_users())
    if not form.is_submitted() and request.args.get('asset_id', type=int):
        form.asset_id.data = request.args.get('asset_id', type=int)

    if form.validate_on_submit():
        try:
            work_order = service.create(form.payload(requested_by_id=current_user.id))
        except ApiError as e:
            flash(f'Error creating work order: {e.message}', 'danger')
        else:
            flash(f'Work order {work_order.work_order_number} created.', 'success')
            return redirect(url_for('work_orders.view_work_order', work_order_id=work_order.id))
    return render_template('work_orders/form.html', title='New Work Order', form=form)


@bp.route('/<int:work_order_id>')
@login_required
def view_work_order(work_order_id):
    work_order = WorkOrderService.current().get_details(work_order_id)

    labor_form = LaborForm()
    labor_form.user_id.choices = [(u.id, u.full_name)
                                  for u in UserService.current().active_users()]
    labor_form.date_performed.data = date.today()
    labor_form.user_id.data = current_user.id

    part_form = PartForm()
    part_form.inventory_item_id.choices = [
        (i.id, f'{i.part_number} - {i.name} ({i.quantity_in_stock} in stock)')
        for i in InventoryService.current().list_items() if i.is_active]

    documents = DocumentService.current().list_documents(EntityType.WORK_ORDER, work_order_id)
    return render_template('work_orders/detail.html', title=work_order.title,
                           work_order=work_order, documents=documents,
                           status_form=StatusForm.for_enum(WorkOrderStatus, work_order.status),
                           field=OptimisticField('status', work_order.status),
                           labor_form=labor_form, part_form=part_form)


@bp.route('/<int:work_order_id>/status', methods=['POST'])
@login_required
def update_status(work_order_id):
    service = WorkOrderService.current()
    work_order = service.get_details(work_order_id)
    field = OptimisticField('status', work_order.status)
    form = StatusForm.for_enum(WorkOrderStatus)

    if form.validate_on_submit():
        proposed = match_enum(WorkOrderStatus, form.status.data)
        try:
            field.apply(proposed, service.status_mutation(work_order_id, proposed))
        except ApiError as e:
            flash(f'Error updating status: {e.message}', 'danger')
        else:
            flash(f'Status changed to {status_label(proposed)}.', 'success')
    else:
        flash_errors(form)

    if request.headers.get('HX-Request'):
        work_order = service.get_details(work_order_id)
        return render_template('partials/status_select.html',
                               form=StatusForm.for_enum(WorkOrderStatus, field.value),
                               field=field, status=work_order.status,
                               action=url_for('work_orders.update_status',
                                              work_order_id=work_order_id))
    return redirect(url_for('work_orders.view_work_order', work_order_id=work_order_id))


@bp.route('/<int:work_order_id>/labor', methods=['POST'])
@login_required
def log_labor(work_order_id):
    form = LaborForm()
    form.user_id.choices = [(u.id, u.full_name) for u in UserService.current().active_users()]
    if form.validate_on_submit():
        payload = {
            'userId': form.user_id.data,
            'hours': str(form.hours.data),
            'laborCost': str(form.labor_cost.data) if form.labor_cost.data is not None else None,
            'datePerformed': form.date_performed.data.isoformat(),
            'notes': form.notes.data or None,
        }
        try:
            WorkOrderService.current().log_labor(work_order_id, payload)
        except ApiError as e:
            flash(f'Error logging labor: {e.message}', 'danger')
        else:
            flash(f'Logged {form.hours.data} hours.', 'success')
    else:
        flash_errors(form)
    return redirect(url_for('work_orders.view_work_order', work_order_id=work_order_id))


@bp.route('/<int:work_order_id>/parts', methods=['POST'])
@login_required
def issue_part(work_order_id):
    form = PartForm()
    form.inventory_item_id.choices = [(i.id, i.name)
                                      for i in InventoryService.current().list_items()]
    if form.validate_on_submit():
        try:
            WorkOrderService.current().issue_part(work_order_id, form.inventory_item_id.data,
                                                  form.quantity.data)
        except ApiError as e:
            flash(f'Error issuing part: {e.message}', 'danger')
        else:
            flash('Part issued to work order.', 'success')
    else:
        flash_errors(form)
    return redirect(url_for('work_orders.view_work_order', work_order_id=work_order_id))


@bp.route('/<int:work_order_id>/unassign', methods=['POST'])
@login_required
def unassign(work_order_id):
    try:
        WorkOrderService.current().unassign(work_order_id)
    except ApiError as e:
        flash(f'Error unassigning work order: {e.message}', 'danger')
    else:
        flash('Work order unassigned.', 'success')
    return redirect(url_for('work_orders.view_work_order', work_order_id=work_order_id))
