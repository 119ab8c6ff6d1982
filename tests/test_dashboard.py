import csv
import io


def test_dashboard_counts(client, login):
    login()
    response = client.get('/dashboard/')
    assert response.status_code == 200
    text = response.get_data(as_text=True)
    assert 'Total assets</div><div class="fs-3">2<' in text
    assert 'Open work orders</div><div class="fs-3">2<' in text
    assert 'Low stock items</div><div class="fs-3">1<' in text
    assert 'SEAL-10' in text


def test_download_report(client, login):
    login()
    response = client.get('/dashboard/download_report')
    assert response.mimetype == 'text/csv'
    assert 'asset_report.csv' in response.headers['Content-Disposition']

    rows = list(csv.reader(io.StringIO(response.get_data(as_text=True))))
    assert rows[0] == ['Asset Number', 'Description', 'Type', 'Status', 'Location',
                       'Open Work Orders', 'Last Service']
    pump = next(row for row in rows if row[0] == 'PMP-042')
    assert pump[2] == 'Pump'
    assert pump[3] == 'Operational'
    assert pump[5] == '1'
    assert pump[6] != ''


def test_download_report_follows_work_order_changes(client, login):
    login()

    def open_count():
        response = client.get('/dashboard/download_report')
        rows = list(csv.reader(io.StringIO(response.get_data(as_text=True))))
        return next(row for row in rows if row[0] == 'PMP-042')[5]

    assert open_count() == '1'
    client.post('/work-orders/2/status', data={'status': 'completed'})
    assert open_count() == '0'

    client.post('/work-orders/add', data={'title': 'Check alignment', 'asset_id': '42',
                                          'type_id': '1', 'priority': 'low',
                                          'status': 'requested', 'assigned_to_id': ''})
    assert open_count() == '1'


def test_scan_asset(client, login):
    login()
    response = client.post('/scanner/', data={'barcode': ' A-42 '})
    assert b'Asset PMP-042' in response.data
    assert b'/assets/42' in response.data


def test_scan_inventory_item(client, login):
    login()
    response = client.post('/scanner/', data={'barcode': 'P-10'})
    assert b'Part SEAL-10' in response.data
    assert b'2 in stock' in response.data


def test_scan_unknown_barcode(client, login):
    login()
    response = client.post('/scanner/', data={'barcode': 'ZZZ'})
    assert b'No item found with this barcode' in response.data
    assert b'id="scan-result"' not in response.data


def test_scan_requires_barcode(client, login, backend):
    login()
    response = client.post('/scanner/', data={'barcode': ''})
    assert b'Barcode is required' in response.data
    assert backend.count('POST', '/api/scan') == 0
