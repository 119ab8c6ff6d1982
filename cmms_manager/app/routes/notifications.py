from flask import flash, redirect, render_template, request, url_for
from flask_login import login_required

from ..api import ApiError
from ..services.notifications import NotificationService
from . import notifications_bp as bp


def visible_notifications():
    return [n for n in NotificationService.current().list_notifications() if not n.is_dismissed]


def back_to_list():
    if request.headers.get('HX-Request'):
        notifications = visible_notifications()
        return render_template('partials/notification_list.html', notifications=notifications)
    return redirect(url_for('notifications.list_notifications'))


@bp.route('/')
@login_required
def list_notifications():
    return render_template('notifications/list.html', title='Notifications',
                           notifications=visible_notifications())


@bp.route('/<int:notification_id>/read', methods=['POST'])
@login_required
def mark_read(notification_id):
    try:
        NotificationService.current().mark_read(notification_id)
    except ApiError as e:
        flash(f'Error updating notification: {e.message}', 'danger')
    return back_to_list()


@bp.route('/<int:notification_id>/dismiss', methods=['POST'])
@login_required
def dismiss(notification_id):
    try:
        NotificationService.current().dismiss(notification_id)
    except ApiError as e:
        flash(f'Error dismissing notification: {e.message}', 'danger')
    return back_to_list()


@bp.route('/read-all', methods=['POST'])
@login_required
def mark_all_read():
    try:
        NotificationService.current().mark_all_read()
    except ApiError as e:
        flash(f'Error updating notifications: {e.message}', 'danger')
    else:
        flash('All notifications marked as read.', 'success')
    return back_to_list()


@bp.route('/<int:notification_id>/delete', methods=['POST'])
@login_required
def delete(notification_id):
    try:
        NotificationService.current().delete(notification_id)
    except ApiError as e:
        flash(f'Error deleting notification: {e.message}', 'danger')
    else:
        flash('Notification deleted.', 'success')
    return back_to_list()
