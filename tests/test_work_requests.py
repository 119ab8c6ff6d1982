def test_list_requests(client, login):
    login()
    response = client.get('/work-requests/')
    assert b'WR-1' in response.data
    assert b'Pump is noisy' in response.data
    assert b'PMP-042' in response.data
    assert b'Convert to work order' in response.data


def test_submit_request(client, login, backend):
    login()
    client.get('/work-requests/')
    response = client.post('/work-requests/add', data={
        'title': 'Leaking valve',
        'asset_id': '42',
        'priority': 'high',
    }, follow_redirects=True)
    assert b'Work request submitted.' in response.data
    assert b'Leaking valve' in response.data
    assert backend.work_requests[1000]['requestedById'] == 5
    assert backend.count('GET', '/api/work-requests/details') == 2


def test_submit_request_needs_a_title(client, login, backend):
    login()
    response = client.post('/work-requests/add', data={'title': 'ab', 'priority': 'low'})
    assert b'Field must be between 3 and 200 characters long.' in response.data
    assert backend.count('POST', '/api/work-requests') == 0


def test_convert_refreshes_work_orders(client, login, backend):
    login()
    client.get('/work-orders/')
    response = client.post('/work-requests/1/convert', follow_redirects=True)
    assert b'Request converted to work order WO-1000.' in response.data
    assert backend.work_requests[1]['workOrderId'] == 1000

    response = client.get('/work-orders/')
    assert b'Pump is noisy' in response.data
    assert backend.count('GET', '/api/work-orders/details') == 2

    response = client.get('/work-requests/')
    assert b'View work order' in response.data


def test_convert_twice(client, login):
    login()
    client.post('/work-requests/1/convert')
    response = client.post('/work-requests/1/convert', follow_redirects=True)
    assert b'Error converting request: Work request already converted' in response.data
