"""
Pytest fixtures for ProPOS backend tests.

Provides an in-memory database, seeded users/products, and signed-in test clients.
"""

from decimal import Decimal

import pytest
from propos import create_app
from propos.extensions import db
from propos.models import Product, Category
from propos.services import auth_service, shift_service

TEST_PASSWORD = "secret123"


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
        'SQLALCHEMY_TRACK_MODIFICATIONS': False,
        'TAX_ENABLED': False,
    })

    with app.app_context():
        db.create_all()
        yield app
        db.drop_all()


@pytest.fixture(scope='function')
def db_session(app):
    """Fresh data for each test."""
    meta = db.metadata
    for table in reversed(meta.sorted_tables):
        db.session.execute(table.delete())
    db.session.commit()

    yield db.session

    db.session.rollback()


@pytest.fixture(scope='function')
def client(app, db_session):
    return app.test_client()


def _make_user(email: str, name: str, role: str):
    return auth_service.create_user(
        email=email, password=TEST_PASSWORD, name=name, role=role, bcrypt_rounds=4
    )


@pytest.fixture(scope='function')
def admin_user(db_session):
    return _make_user("admin@pos.com", "Admin User", "admin")


@pytest.fixture(scope='function')
def cashier(db_session):
    return _make_user("kasir@pos.com", "Cashier 01", "employee")


@pytest.fixture(scope='function')
def other_cashier(db_session):
    return _make_user("kasir2@pos.com", "Cashier 02", "employee")


@pytest.fixture(scope='function')
def espresso(db_session):
    """Product p1 from the checkout scenarios: 3.50, 45 in stock."""
    product = Product(name="Espresso Intenso", category="Coffee", price=Decimal("3.50"), stock=45)
    db_session.add(product)
    db_session.commit()
    return product


@pytest.fixture(scope='function')
def muffin(db_session):
    product = Product(name="Blueberry Muffin", category="Bakery", price=Decimal("3.25"), stock=12)
    db_session.add(product)
    db_session.commit()
    return product


@pytest.fixture(scope='function')
def coffee_category(db_session):
    category = Category(name="Coffee")
    db_session.add(category)
    db_session.commit()
    return category


@pytest.fixture(scope='function')
def open_shift(cashier):
    return shift_service.open_shift(cashier.id, "100.00")


def login(client, email: str, password: str = TEST_PASSWORD):
    """Sign a test client in; the session cookie stays in its cookie jar."""
    response = client.post('/api/auth/login', json={'email': email, 'password': password})
    assert response.status_code == 200, response.get_json()
    return response


@pytest.fixture(scope='function')
def cashier_client(app, cashier):
    c = app.test_client()
    login(c, cashier.email)
    return c


@pytest.fixture(scope='function')
def admin_client(app, admin_user):
    c = app.test_client()
    login(c, admin_user.email)
    return c
