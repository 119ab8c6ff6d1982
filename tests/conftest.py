import pytest

from cmms_manager.app import create_app
from cmms_manager.app.cache import QueryCache
from cmms_manager.config import TestConfig
from fake_backend import FakeBackend


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def app(backend):
    app = create_app(TestConfig)
    app.config['API_TRANSPORT_ADAPTER'] = backend
    yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def login(client):
    def do_login(username='tom', password='secret'):
        return client.post('/login', data={'username': username, 'password': password},
                           follow_redirects=True)
    return do_login


@pytest.fixture
def cache():
    return QueryCache()
