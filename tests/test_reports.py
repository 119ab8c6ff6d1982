import csv
import io

from cmms_manager.app.models import InventoryItem
from cmms_manager.app.services.reports import inventory_summary


def download(client, tab):
    response = client.get(f'/reports/download?tab={tab}')
    assert response.mimetype == 'text/csv'
    assert f'{tab}_report.csv' in response.headers['Content-Disposition']
    return dict(csv.reader(io.StringIO(response.get_data(as_text=True))))


def test_inventory_summary():
    items = [
        InventoryItem(id=1, part_number='A', name='a', unit_cost='2.50', quantity_in_stock=4,
                      reorder_point=5),
        InventoryItem(id=2, part_number='B', name='b', quantity_in_stock=10, reorder_point=5),
    ]
    summary = inventory_summary(items)
    assert summary['low_stock'] == 1
    assert summary['adequate'] == 1
    assert str(summary['valuation']) == '10.00'


def test_work_order_report(client, login):
    login()
    response = client.get('/reports/')
    text = response.get_data(as_text=True)
    assert 'Completion Rate' in text
    assert '33%' in text

    rows = download(client, 'work_orders')
    assert rows['Metric'] == 'Value'
    assert rows['Total'] == '3'
    assert rows['Completed'] == '1'
    assert rows['In Progress'] == '1'
    assert rows['Pending'] == '1'


def test_work_order_report_follows_status_changes(client, login):
    login()
    assert download(client, 'work_orders')['Completed'] == '1'
    client.post('/work-orders/2/status', data={'status': 'completed'})
    rows = download(client, 'work_orders')
    assert rows['Completed'] == '2'
    assert rows['Completion Rate'] == '67'


def test_inventory_report(client, login):
    login()
    response = client.get('/reports/?tab=inventory')
    assert b'$331.00' in response.data

    rows = download(client, 'inventory')
    assert rows['Low Stock'] == '1'
    assert rows['Valuation'] == '331.00'


def test_asset_report(client, login):
    login()
    response = client.get('/reports/?tab=assets')
    assert b'Assets by status' in response.data

    rows = download(client, 'assets')
    assert rows['In Service'] == '2'
    assert rows['By Status: Operational'] == '2'
    assert rows['By Status: Retired'] == '0'


def test_cost_report(client, login):
    login()
    response = client.get('/reports/?tab=costs')
    assert b'$0.00' in response.data

    client.post('/work-orders/3/labor', data={'user_id': '5', 'hours': '2.5', 'labor_cost': '80',
                                              'date_performed': '2024-03-04'})
    client.post('/work-orders/3/parts', data={'inventory_item_id': '11', 'quantity': '3'})

    response = client.get('/reports/?tab=costs')
    assert b'$116.00' in response.data
    rows = download(client, 'costs')
    assert rows['Labor Hours'] == '2.5'
    assert rows['Parts Cost'] == '36.00'


def test_unknown_tab_falls_back_to_work_orders(client, login):
    login()
    response = client.get('/reports/?tab=bogus')
    assert b'Completion Rate' in response.data
