from datetime import date, datetime

from cmms_manager.app.models import AssetWithDetails, WorkOrder
from cmms_manager.app.models.maintenance import (ScheduleStatus, build_schedule, pm_title,
                                                 schedule_counts)


def pump(**kwargs):
    fields = dict(id=42, asset_number='PMP-042', description='Feed pump', status='operational',
                  last_service_date=datetime(2024, 1, 15))
    fields.update(kwargs)
    return AssetWithDetails(**fields)


def test_schedule_follows_last_service():
    events = build_schedule([pump()], [], today=date(2024, 3, 15))
    assert [(e.due_date, e.status) for e in events] == [
        (date(2024, 2, 14), ScheduleStatus.OVERDUE),
        (date(2024, 3, 15), ScheduleStatus.DUE),
        (date(2024, 4, 14), ScheduleStatus.UPCOMING),
    ]
    assert events[0].title == 'Equipment Maintenance'


def test_never_serviced_asset_is_staggered():
    events = build_schedule([pump(id=7, asset_number='BLR-007', last_service_date=None)], [],
                            today=date(2024, 3, 1))
    assert events[0].due_date == date(2024, 3, 9)
    assert events[1].due_date == date(2024, 5, 8)


def test_only_operational_assets_are_scheduled():
    assets = [pump(), pump(id=43, asset_number='PMP-043', status='retired')]
    events = build_schedule(assets, [], today=date(2024, 3, 15))
    assert {e.asset.asset_number for e in events} == {'PMP-042'}


def test_completed_work_order_completes_the_occurrence():
    work_orders = [
        WorkOrder(id=9, work_order_number='WO-9', title=pm_title('Lubrication'),
                  status='completed', asset_id=42, date_needed=datetime(2024, 2, 14)),
        WorkOrder(id=10, work_order_number='WO-10', title=pm_title('Cleaning'),
                  status='scheduled', asset_id=42, date_needed=datetime(2024, 4, 14)),
        # not preventive
        WorkOrder(id=11, work_order_number='WO-11', title='Fix leak',
                  status='completed', asset_id=42, date_needed=datetime(2024, 3, 15)),
    ]
    events = build_schedule([pump()], work_orders, today=date(2024, 3, 15))
    assert [(e.status, e.work_order_id) for e in events] == [
        (ScheduleStatus.COMPLETED, 9),
        (ScheduleStatus.DUE, None),
        (ScheduleStatus.UPCOMING, 10),
    ]
    counts = schedule_counts(events)
    assert counts[ScheduleStatus.COMPLETED] == 1
    assert counts[ScheduleStatus.OVERDUE] == 0


def test_schedule_page(client, login):
    login()
    response = client.get('/maintenance/')
    assert response.status_code == 200
    text = response.get_data(as_text=True)
    assert 'PMP-042' in text
    assert 'BLR-007' in text
    assert 'Pump Maintenance' in text

    response = client.get('/maintenance/?status=overdue', headers={'HX-Request': 'true'})
    text = response.get_data(as_text=True)
    assert text.count('PMP-042') == 3
    assert 'BLR-007' not in text
    assert '<html' not in text

    response = client.get('/maintenance/?status=upcoming')
    assert b'BLR-007' in response.data
    assert b'PMP-042' not in response.data


def test_schedule_form_is_prefilled(client, login):
    login()
    response = client.get('/maintenance/schedule?asset_id=42&date=2024-04-14')
    assert b'value="2024-04-14"' in response.data
    assert b'selected value="42"' in response.data


def test_schedule_maintenance_creates_work_order(client, login, backend):
    login()
    client.get('/maintenance/')
    reads = backend.count('GET', '/api/work-orders/details')

    response = client.post('/maintenance/schedule', data={
        'asset_id': '42', 'maintenance_type': 'Lubrication',
        'description': 'Grease the bearings', 'start_date': '2024-04-14',
        'recurring': 'y', 'recurring_period': 'monthly', 'occurrences': '6',
        'technician_id': '5', 'priority': 'high', 'duration': '1.5',
        'notes': 'Use food grade grease'}, follow_redirects=True)
    assert b'Maintenance scheduled as work order WO-1000.' in response.data
    # the occurrence now links to its work order
    assert b'/work-orders/1000' in response.data
    assert backend.count('GET', '/api/work-orders/details') == reads + 1

    work_order = backend.work_orders[1000]
    assert work_order['title'] == 'Preventive Maintenance - Lubrication'
    assert work_order['status'] == 'scheduled'
    assert work_order['assetId'] == 42
    assert work_order['assignedToId'] == 5
    assert work_order['dateScheduled'] == '2024-04-14'
    assert 'Repeats monthly for 6 occurrences.' in work_order['description']
    assert work_order['description'].endswith('Use food grade grease')


def test_schedule_maintenance_validation(client, login, backend):
    login()
    response = client.post('/maintenance/schedule', data={
        'asset_id': 'None', 'maintenance_type': 'Cleaning', 'description': 'abc',
        'start_date': '2024-04-14', 'priority': 'medium', 'duration': '1'})
    assert b'Please select an asset' in response.data
    assert b'Description must be at least 5 characters' in response.data
    assert backend.count('POST', '/api/work-orders') == 0


def test_recurring_maintenance_needs_occurrences(client, login, backend):
    login()
    response = client.post('/maintenance/schedule', data={
        'asset_id': '7', 'maintenance_type': 'Cleaning', 'description': 'Clean burner',
        'start_date': '2024-04-14', 'recurring': 'y', 'recurring_period': 'weekly',
        'occurrences': '', 'priority': 'medium', 'duration': '1'})
    assert b'Recurring maintenance needs a number of occurrences' in response.data
    assert backend.count('POST', '/api/work-orders') == 0
