import pytest

from app import create_app
from gateway import FakeGateway


@pytest.fixture()
def gateway():
    return FakeGateway()


@pytest.fixture()
def app(gateway):
    app = create_app(
        {
            "TESTING": True,
            "DATABASE_URL": "sqlite://",
            "FRONTEND_URL": "http://shop.test",
            "CURRENCY": "usd",
        },
        gateway=gateway,
    )
    yield app


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def service(app):
    return app.extensions["checkout"]


@pytest.fixture()
def cart():
    return [
        {"id": "1", "name": "Premium Wireless Headphones", "price": 299.99, "quantity": 1, "image": "https://img.test/1.jpg"},
        {"id": "3", "name": "Pro Gaming Mouse", "price": 89.99, "quantity": 2, "image": "https://img.test/3.jpg"},
    ]
