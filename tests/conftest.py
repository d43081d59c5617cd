import pytest

from app import create_app
from config import TestConfig
from models import db
from services import catalog, customers


@pytest.fixture
def app():
    app = create_app(TestConfig)
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def app_ctx(app):
    """Application context for calling the service layer directly."""
    with app.app_context():
        yield app
        db.session.remove()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def admin_client(app):
    client = app.test_client()
    response = client.post('/api/admin/login', json={'password': 'azhar2311'})
    assert response.status_code == 200
    return client


@pytest.fixture
def make_product(app_ctx):
    def _make(**fields):
        data = {'name': 'Oud Oil', 'name_ar': 'دهن عود', 'price': '10.000', 'total_stock': 5}
        data.update(fields)
        return catalog.create_product(data)
    return _make


@pytest.fixture
def make_customer(app_ctx):
    def _make(**fields):
        data = {'name': 'Fatima', 'phone': '36000000', 'address': 'House 1, Road 2, Block 3, Sitra'}
        data.update(fields)
        return customers.create_customer(data)
    return _make


@pytest.fixture
def customer_draft():
    return {'name': 'Ali', 'phone': '33112233', 'home': '12', 'road': '45', 'block': '607', 'town': 'Sitra'}
