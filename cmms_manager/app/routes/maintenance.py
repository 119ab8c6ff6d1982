from datetime import date

from flask import flash, redirect, render_template, request, url_for
from flask_login import current_user, login_required

from ..api import ApiError
from ..forms import PreventiveMaintenanceForm
from ..models.maintenance import ScheduleStatus, schedule_counts
from ..services.assets import AssetService
from ..services.maintenance import MaintenanceService
from ..services.users import UserService
from . import maintenance_bp as bp


@bp.route('/')
@login_required
def schedule():
    events = MaintenanceService.current().schedule()
    counts = schedule_counts(events)

    status = request.args.get('status', 'all')
    if status in {s.value for s in ScheduleStatus}:
        events = [e for e in events if e.status == status]
    else:
        status = 'all'

    if request.headers.get('HX-Request'):
        return render_template('partials/maintenance_table.html', events=events)
    return render_template('maintenance/schedule.html', title='Preventive Maintenance',
                           events=events, counts=counts, status=status,
                           statuses=list(ScheduleStatus))


@bp.route('/schedule', methods=['GET', 'POST'])
@login_required
def schedule_maintenance():
    service = MaintenanceService.current()
    form = PreventiveMaintenanceForm()
    form.set_choices(AssetService.current().list_assets(), UserService.current().list_users())

    if not form.is_submitted():
        form.asset_id.data = request.args.get('asset_id', type=int)
        form.start_date.data = request.args.get('date', type=date.fromisoformat) or date.today()

    if form.validate_on_submit():
        payload = form.payload(type_id=service.preventive_type_id(),
                               requested_by_id=current_user.id)
        try:
            work_order = service.schedule_work_order(payload)
        except ApiError as e:
            flash(f'Error scheduling maintenance: {e.message}', 'danger')
        else:
            flash(f'Maintenance scheduled as work order {work_order.work_order_number}.',
                  'success')
            return redirect(url_for('maintenance.schedule'))
    return render_template('maintenance/form.html', title='Schedule Maintenance', form=form)
