from contextlib import ExitStack
import pytest
from fastapi.testclient import TestClient
from storefront.core.config import Settings
from storefront.main import create_app

SESSION = {'X-Session-ID': 's1'}

SHIPPING = {
    'fullName': 'Jane Doe',
    'email': 'jane@example.com',
    'phone': '555-0100',
    'address': '1 Main St',
    'city': 'Springfield',
    'state': 'IL',
    'zipCode': '62701',
}

def make_settings(backend: str, **overrides) -> Settings:
    values = dict(
        STORAGE_BACKEND=backend,
        DATABASE_URL='sqlite://',
        CREATE_TABLES=True,
        SEED_DATA=True,
        METRICS_ENABLED=False,
        PAYMENT_GATEWAY='mock',
        ADMIN_USERNAME='admin',
        ADMIN_PASSWORD='admin123',
        ADMIN_EMAIL='admin@example.com',
        INVENTORY_DECREMENT_ON_ORDER=False,
        SHIPPING_LABEL_DELAY_SECONDS=0,
        LOG_LEVEL='WARNING',
    )
    values.update(overrides)
    return Settings(**values)

@pytest.fixture(params=['memory', 'sql'])
def backend(request):
    return request.param

@pytest.fixture
def settings(backend):
    return make_settings(backend)

@pytest.fixture
def client(settings):
    with TestClient(create_app(settings)) as c:
        yield c

@pytest.fixture
def client_factory(backend):
    """Build extra clients with settings overrides on the current backend."""
    with ExitStack() as stack:
        def build(**overrides):
            return stack.enter_context(TestClient(create_app(make_settings(backend, **overrides))))
        yield build

def login(client, username='admin', password='admin123'):
    return client.post('/api/login', json={'username': username, 'password': password})

@pytest.fixture
def admin(client):
    r = login(client)
    assert r.status_code == 200, r.text
    return client

def add_to_cart(client, product_id, quantity=1, session=SESSION):
    return client.post('/api/cart', json={'productId': product_id, 'quantity': quantity}, headers=session)

def place_order(client, total='0', session=SESSION, **extra):
    body = dict(SHIPPING, totalAmount=total, **extra)
    return client.post('/api/orders', json=body, headers=session)
