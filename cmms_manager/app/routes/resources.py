from flask import abort, flash, redirect, render_template, request, url_for
from flask_login import login_required

from ..api import ApiError
from ..forms import AssignWorkOrderForm, flash_errors
from ..services.users import UserService
from ..services.work_orders import AssignmentError, WorkOrderService
from . import resources_bp as bp


@bp.route('/')
@login_required
def list_resources():
    show = request.args.get('show', 'active')
    users = UserService.current().list_users()
    if show == 'active':
        users = [u for u in users if u.is_active]
    elif show == 'inactive':
        users = [u for u in users if not u.is_active]
    counts = WorkOrderService.current().assigned_counts()
    return render_template('resources/list.html', title='Resources', users=users,
                           counts=counts, show=show)


@bp.route('/<int:user_id>/assign', methods=['GET', 'POST'])
@login_required
def assign(user_id):
    """Assignment dialog: only unassigned, still open work orders are offered."""
    users = UserService.current().list_users()
    user = next((u for u in users if u.id == user_id), None)
    if user is None:
        abort(404)

    service = WorkOrderService.current()
    form = AssignWorkOrderForm()
    form.work_order_id.choices = [(None, 'Select a work order')] + [
        (wo.id, f'{wo.work_order_number} - {wo.title}') for wo in service.assignable()]

    if form.validate_on_submit():
        try:
            service.assign(form.work_order_id.data, user_id, users)
        except AssignmentError as e:
            flash(str(e), 'danger')
        except ApiError as e:
            flash(f'Error assigning work order: {e.message}', 'danger')
        else:
            flash(f'Work order assigned to {user.full_name}.', 'success')
            return redirect(url_for('resources.list_resources'))
    elif form.is_submitted():
        flash_errors(form)

    if request.headers.get('HX-Request'):
        return render_template('partials/assign_dialog.html', form=form, user=user)
    return render_template('resources/assign.html', title=f'Assign {user.full_name}',
                           form=form, user=user)
