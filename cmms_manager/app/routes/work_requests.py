from flask import flash, redirect, render_template, url_for
from flask_login import current_user, login_required

from ..api import ApiError
from ..forms import WorkRequestForm
from ..services.assets import AssetService
from ..services.work_requests import WorkRequestService
from . import work_requests_bp as bp


@bp.route('/')
@login_required
def list_requests():
    work_requests = WorkRequestService.current().list_with_details()
    return render_template('work_requests/list.html', title='Work Requests',
                           work_requests=work_requests)


@bp.route('/add', methods=['GET', 'POST'])
@login_required
def add_request():
    form = WorkRequestForm()
    form.set_choices(AssetService.current().list_assets())
    if form.validate_on_submit():
        payload = {
            'title': form.title.data.strip(),
            'description': form.description.data or None,
            'assetId': form.asset_id.data,
            'priority': form.priority.data,
            'requestedById': current_user.id,
        }
        try:
            WorkRequestService.current().create(payload)
        except ApiError as e:
            flash(f'Error submitting request: {e.message}', 'danger')
        else:
            flash('Work request submitted.', 'success')
            return redirect(url_for('work_requests.list_requests'))
    return render_template('work_requests/form.html', title='New Work Request', form=form)


@bp.route('/<int:request_id>/convert', methods=['POST'])
@login_required
def convert(request_id):
    try:
        work_order = WorkRequestService.current().convert(request_id)
    except ApiError as e:
        flash(f'Error converting request: {e.message}', 'danger')
        return redirect(url_for('work_requests.list_requests'))
    flash(f'Request converted to work order {work_order.work_order_number}.', 'success')
    return redirect(url_for('work_orders.view_work_order', work_order_id=work_order.id))
