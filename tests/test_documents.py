import io

import pytest

from cmms_manager.app.models import Document
from cmms_manager.app.services.documents import DocumentService


def test_asset_detail_lists_documents(client, login):
    login()
    response = client.get('/assets/42')
    assert b'manual.pdf' in response.data
    assert b'2.0 KB' in response.data


def test_document_list_partial(client, login):
    login()
    response = client.get('/documents/asset/42', headers={'HX-Request': 'true'})
    assert b'manual.pdf' in response.data
    response = client.get('/documents/workorder/3')
    assert b'No documents attached.' in response.data


def test_unknown_owner_type(client, login):
    login()
    assert client.get('/documents/building/1').status_code == 404


def test_download_passes_the_file_through(client, login):
    login()
    response = client.get('/documents/100/download')
    assert response.status_code == 200
    assert response.data == b'%PDF-1.4 pump manual'
    assert response.mimetype == 'application/pdf'
    assert 'manual.pdf' in response.headers['Content-Disposition']


def test_upload(client, login, backend):
    login()
    client.get('/assets/42')
    response = client.post('/documents/asset/42/upload', data={
        'title': 'Pump notes',
        'file': (io.BytesIO(b'hello pump'), 'notes.txt'),
    }, content_type='multipart/form-data', follow_redirects=True)
    assert b'notes.txt uploaded.' in response.data
    assert backend.documents[1000]['filename'] == 'notes.txt'
    assert backend.document_content[1000].strip() == b'hello pump'
    assert backend.count('GET', '/api/documents/asset/42') == 2


def test_upload_validation(client, login, backend):
    login()
    response = client.post('/documents/asset/42/upload', data={'title': 'x'},
                           content_type='multipart/form-data')
    assert b'Title must be at least 2 characters' in response.data
    assert b'A file is required' in response.data
    assert backend.count('POST', '/api/documents/asset/42/upload') == 0


def test_delete_requires_confirmation(client, login, backend):
    login()
    response = client.get('/documents/asset/42/100/delete')
    assert b'Delete manual.pdf?' in response.data

    response = client.post('/documents/asset/42/100/delete', data={})
    assert b'Please confirm the deletion' in response.data
    assert backend.count('DELETE', '/api/documents/100') == 0
    assert 100 in backend.documents


def test_delete(client, login, backend):
    login()
    response = client.post('/documents/asset/42/100/delete', data={'confirm': 'y'},
                           follow_redirects=True)
    assert b'manual.pdf deleted.' in response.data
    assert 100 not in backend.documents
    assert b'No documents attached.' in response.data


def test_delete_missing_document(client, login):
    login()
    assert client.get('/documents/asset/42/555/delete').status_code == 404


def test_service_refuses_unconfirmed_delete(cache):
    document = Document(id=1, filename='a.txt', filesize=1, entity_type='asset', entity_id=42)
    with pytest.raises(ValueError):
        DocumentService(None, cache).delete(document)
